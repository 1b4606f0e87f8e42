from jsonstore import errors

try:
    import orjson as json
except ImportError:
    import json


def encode(value) -> str:
    try:
        out = json.dumps(value)
    except (TypeError, ValueError) as e:
        raise errors.codecFailed(f'Cannot encode {type(value).__name__} to JSON: {e}') from e
    # orjson returns bytes
    if isinstance(out, bytes):
        out = out.decode()
    return out


def decode(body):
    if not isinstance(body, (str, bytes)):
        raise errors.codecFailed(f'string expected for JSON body, got {type(body).__name__}')
    try:
        return json.loads(body)
    except ValueError as e:
        raise errors.codecFailed(f'Cannot decode JSON: {e}') from e
