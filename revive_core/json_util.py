import orjson


def dumps(o) -> bytes:
    return orjson.dumps(o, option=orjson.OPT_NON_STR_KEYS)


def loads(blob):
    return orjson.loads(blob)
