utf8_bom = b"\xef\xbb\xbf"

def strip_utf8_bom(data: bytes) -> bytes:
    # removes the utf-8 byte order mark from byte data if present.
    if data.startswith(utf8_bom):
        return data[len(utf8_bom):]
    return data

def looks_like_glob(s: str) -> bool:
    # true if the string contains any shell-style wildcard character.
    return any(ch in s for ch in "*?[")
