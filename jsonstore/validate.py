from collections.abc import Mapping
import re

from jsonstore import errors

TOKEN_RE = re.compile(r'[A-Za-z0-9]+$')


def _typename(value):
    return type(value).__name__


def match_token(token) -> str:
    """Return the trailing alphanumeric run of token.

    Accepts a bare token or a full endpoint url like
    https://www.jsonstore.io/abc123, so both forms yield 'abc123'.
    """
    if not isinstance(token, str):
        raise errors.invalidArguments(f'string expected for token, got {_typename(token)}')
    match = TOKEN_RE.search(token)
    if not match:
        raise errors.invalidArguments(f'token {token!r} does not end with an alphanumeric run')
    return match.group(0)


def check_path(path):
    if not isinstance(path, str):
        raise errors.invalidArguments(f'string expected for path, got {_typename(path)}')
    return path


def check_content(content, name='content'):
    """Accept a dict with str keys, a list or a tuple.

    Only the top level is checked, nested values that orjson cannot
    serialize still fail later as codecFailed.
    """
    if isinstance(content, dict):
        for key in content:
            if not isinstance(key, str):
                raise errors.invalidArguments(f'string keys expected in {name}, got {_typename(key)}')
        return content
    if not isinstance(content, (list, tuple)):
        raise errors.invalidArguments(f'table expected for {name}, got {_typename(content)}')
    return content


def check_put(path, content, name='content'):
    return check_path(path), check_content(content, name)


def is_empty_mapping(value) -> bool:
    return isinstance(value, Mapping) and not value
