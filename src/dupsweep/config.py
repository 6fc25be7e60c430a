from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class Settings:
    duplicate_threshold: float = 95.0
    hash_size: int = 8
    hash_distance_threshold: int = 5
    hash_match_score: float = 95.0
    canonical_size: Tuple[int, int] = (256, 256)
    pixel_threshold: float = 0.1
    delete_delay: float = 0.1
    max_concurrent: int = 5
    task_timeout: Optional[float] = 120.0
    extensions: Tuple[str, ...] = ("jpg", "jpeg", "png", "gif")
    temp_prefix: str = "temp_convert_to_jpeg_"
