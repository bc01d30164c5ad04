def success(data=None):
    return {
        "success": True,
        "data": data,
    }


def error(code, message, details=None):
    payload = {
        "success": False,
        "error": {
            "code": code,
            "message": message,
        },
    }
    if details:
        payload["error"]["details"] = details
    return payload
