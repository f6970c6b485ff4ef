"""Bucket boundary arithmetic."""


def bucket_boundary(timestamp: int, bucket_seconds: int) -> int:
    """Return the id timestamp of the bucket a mutation at `timestamp` lands in.

    t - (t mod size) + size: the next multiple of `size` strictly after the
    truncated timestamp, so a timestamp already on a boundary opens the following
    bucket (boundary(3600, 3600) == 7200). Persisted snapshot ids depend on this.
    """
    if bucket_seconds <= 0:
        raise ValueError(f"bucket_seconds must be positive, got {bucket_seconds}")
    return timestamp - (timestamp % bucket_seconds) + bucket_seconds
