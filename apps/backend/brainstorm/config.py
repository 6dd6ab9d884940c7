import os


def get_int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default


# Tiers of an idea forest; shared by the validator and the materializer.
MATERIALIZE_MAX_DEPTH = get_int_env("MATERIALIZE_MAX_DEPTH", 8)
# Element nesting accepted by the decoder.
TRANSCODE_MAX_DEPTH = get_int_env("TRANSCODE_MAX_DEPTH", 256)
