from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # Fonts
    font_dir: str = "assets/fonts/Montserrat"
    emoji_font_paths: list[str] = [
        "/usr/share/fonts/truetype/noto/NotoColorEmoji.ttf",
        "/usr/share/fonts/opentype/noto/NotoColorEmoji.ttf",
        "/usr/share/fonts/noto/NotoColorEmoji.ttf",
        "/usr/share/fonts/truetype/noto/NotoEmoji-Regular.ttf",
        "/usr/share/fonts/opentype/noto/NotoEmoji-Regular.ttf",
    ]

    # Rendering
    jpeg_quality: int = 90
    default_accent: str = "#FDC830"
    palette_colors: int = 64
    palette_sample_size: int = 256
    logo_width_ratio: float = 0.15

    # Fetching / request limits
    fetch_timeout: float = 30.0
    request_timeout: float = 30.0
    max_image_bytes: int = 50 * 1024 * 1024  # same cap as the JSON body limit

    cache_control: str = "public, max-age=3600"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
