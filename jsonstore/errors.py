class JsonStoreError(Exception):
    "Base JsonStore Exception"

    def to_dict(self):
        out = {'type': self.__class__.__name__}
        desc = str(self)
        if desc:
            out['description'] = desc
        return out

class invalidArguments(JsonStoreError):
    "One of the arguments is of the wrong type or is otherwise invalid. No request was sent."

class transportFailed(JsonStoreError):
    "The HTTP transaction failed, returned a non-success status or came back without a body."

class serverRejected(transportFailed):
    "The HTTP transaction succeeded, but the server answered with ok set to false."

class codecFailed(JsonStoreError):
    "A value could not be encoded to JSON, or a response body did not parse as JSON."

class tokenProvisionFailed(JsonStoreError):
    "The get-token endpoint could not be reached or did not return a token."

class storeDestroyed(JsonStoreError):
    "The JsonStore was destroyed and cannot be used anymore."
