"""Cache key derivation for reference lookups."""

METADATA_DELIMITER = "--"


def canonicalize_ref(raw_ref: str) -> str:
    """
    Strip an optional ``--<metadata>`` suffix from an image tag.

    "v1.2.3--release" -> "v1.2.3"
    "dd295fd679--stage" -> "dd295fd679"
    """
    base_ref, _, _ = raw_ref.partition(METADATA_DELIMITER)
    return base_ref


def make_cache_key(repository: str, base_ref: str) -> str:
    return f"{repository}:{base_ref}"
