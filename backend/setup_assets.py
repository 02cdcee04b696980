#!/usr/bin/env python3
"""
Setup script to download the Montserrat faces used by the ad renderer.
Run this before starting the server.
"""

import os
import urllib.request
import zipfile
from pathlib import Path

from app.config import get_settings
from app.services.fonts import FONT_FILES, find_emoji_font

FONT_URL = "https://fonts.google.com/download?family=Montserrat"

settings = get_settings()
FONTS_DIR = Path(settings.font_dir)
REQUIRED_FONTS = sorted(FONT_FILES.values())


def setup_directories():
    """Create required directories."""
    print("Creating directories...")
    FONTS_DIR.mkdir(parents=True, exist_ok=True)
    print("✓ Directories created")


def download_fonts():
    """Download Montserrat from Google Fonts and keep the three faces we draw with."""
    zip_path = FONTS_DIR / "montserrat.zip"

    if all((FONTS_DIR / font).exists() for font in REQUIRED_FONTS):
        print("✓ Fonts already exist, skipping download")
        return

    print("Downloading Montserrat fonts...")
    try:
        urllib.request.urlretrieve(FONT_URL, zip_path)
        print("✓ Downloaded font archive")

        print("Extracting fonts...")
        with zipfile.ZipFile(zip_path, "r") as zip_ref:
            for file in zip_ref.namelist():
                font_name = os.path.basename(file)
                if file.endswith(".ttf") and "static" in file and font_name in REQUIRED_FONTS:
                    (FONTS_DIR / font_name).write_bytes(zip_ref.read(file))
                    print(f"  Extracted: {font_name}")

        zip_path.unlink()
        print("✓ Fonts installed")

    except (OSError, zipfile.BadZipFile) as e:
        print(f"✗ Failed to download fonts: {e}")
        print("  Please download Montserrat manually from https://fonts.google.com/specimen/Montserrat")
        print(f"  and place {', '.join(REQUIRED_FONTS)} in: {FONTS_DIR}")


def check_assets():
    """Check fonts and emoji support, and print what is missing."""
    print("\nAsset Status:")

    missing_fonts = []
    for font in REQUIRED_FONTS:
        if (FONTS_DIR / font).exists():
            print(f"✓ {font} found")
        else:
            missing_fonts.append(font)
            print(f"✗ {font} MISSING")

    if missing_fonts:
        print("\n  → Download fonts from: https://fonts.google.com/specimen/Montserrat")
        print(f"  → Place TTF files in: {FONTS_DIR}")

    emoji_font = find_emoji_font(settings.emoji_font_paths)
    if emoji_font:
        print(f"✓ Emoji font found: {emoji_font}")
    else:
        print("✗ No emoji font found (emoji will be substituted or stripped)")
        print("  → On Debian/Ubuntu: apt-get install fonts-noto-color-emoji")

    return not missing_fonts


def main():
    print("=" * 50)
    print("Ad Image API - Asset Setup")
    print("=" * 50)
    print()

    setup_directories()
    download_fonts()

    all_ready = check_assets()

    print()
    print("=" * 50)
    if all_ready:
        print("✓ All assets ready! You can start the server.")
    else:
        print("⚠ Some fonts are missing.")
        print("  The server will still work with fallback fonts.")
    print("=" * 50)


if __name__ == "__main__":
    main()
