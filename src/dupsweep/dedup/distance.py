"""Distance metric for perceptual hash strings."""


def hamming_distance(a: str, b: str) -> int:
    """
    Count the positions at which two hash strings differ.

    Args:
        a: First hash
        b: Second hash

    Returns:
        Number of differing positions

    Raises:
        ValueError: If the hashes differ in length
    """
    if len(a) != len(b):
        raise ValueError(f"Hash lengths differ: {len(a)} != {len(b)}")
    return sum(1 for x, y in zip(a, b) if x != y)
