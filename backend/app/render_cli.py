"""
Render one ad to a file without starting the API server.

    python -m app.render_cli --image URL --headline "..." --subtext "..." \
        --cta "Shop Now" --style Style2 -o ad.jpg
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from app.config import get_settings
from app.design_templates import AdStyle, available_style_ids
from app.errors import InvalidStyleError, ResourceFetchError
from app.models import AdRequest
from app.services.fonts import FontConfig
from app.services.image_loader import fetch_bytes
from app.services.pipeline import render_ad


async def fetch_url_or_file(location: str) -> bytes:
    """Fetch http(s) URLs over the network; anything else is read as a local file."""
    if location.startswith(("http://", "https://")):
        return await fetch_bytes(location)
    try:
        return Path(location).read_bytes()
    except OSError as e:
        raise ResourceFetchError(f"Could not read {location}: {e}") from e


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Compose an ad image from a photo, text and a style")
    ap.add_argument("--image", required=True, help="Background image URL or file path")
    ap.add_argument("--logo", default=None, help="Optional logo image URL or file path")
    ap.add_argument("--headline", required=True)
    ap.add_argument("--subtext", default="")
    ap.add_argument("--cta", default="Shop Now")
    ap.add_argument("--style", default=AdStyle.WAVE.value, help=f"One of {', '.join(available_style_ids())}")
    ap.add_argument("-o", "--out", type=Path, default=Path("ad.jpg"), help="Output JPEG path")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        style = AdStyle.from_id(args.style)
    except InvalidStyleError as e:
        print(f"✗ {e}. Available styles: {', '.join(e.available)}", file=sys.stderr)
        return 2

    request = AdRequest(
        background_image_url=args.image,
        logo_image_url=args.logo,
        headline=args.headline,
        subtext=args.subtext,
        cta=args.cta,
        style=style,
    )
    fonts = FontConfig.load(settings.font_dir, settings.emoji_font_paths)
    result = asyncio.run(render_ad(request, fonts, fetcher=fetch_url_or_file))

    if not result.success:
        failure = result.failure
        print(f"✗ {style.value} failed at {failure.stage}: {failure.message}", file=sys.stderr)
        return 1

    args.out.write_bytes(result.image)
    print(f"✓ Your ad is ready: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
