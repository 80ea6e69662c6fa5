import os
import sys
import logging
import argparse
from collections import Counter
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from tqdm import tqdm

# Load environment variables first
load_dotenv()

from ..models.grid import get_sheet_layout
from ..models.engine_config import EngineConfig
from ..services.image_service import ImageService
from ..pipeline.batch_runner import BatchRunner, BatchResult
from ..pipeline.icon_renderer import render_icons
from ..pipeline.single_cleanup import GREEN_SCREEN_HEX

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sticker-slicer",
        description="Remove green-screen backdrops and slice sticker sheets into PNGs.",
    )
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO"))
    parser.add_argument("--workers", type=int, default=_env_int("MAX_WORKERS", 4))
    sub = parser.add_subparsers(dest="command", required=True)

    p_slice = sub.add_parser("slice", help="cut grid sheets into stickers")
    p_slice.add_argument("inputs", nargs="+", help="sheet files or folders")
    p_slice.add_argument("-o", "--output-dir", default="stickers")
    p_slice.add_argument("--rows", type=int)
    p_slice.add_argument("--cols", type=int)
    p_slice.add_argument("--quantity", type=int,
                         help="sheet preset (8, 16, 24, 32, 40) instead of --rows/--cols")
    p_slice.add_argument("--width", type=int, default=_env_int("OUTPUT_WIDTH", 370))
    p_slice.add_argument("--height", type=int, default=_env_int("OUTPUT_HEIGHT", 320))
    p_slice.add_argument("--padding", type=int, default=_env_int("STICKER_PADDING", 2))
    p_slice.add_argument("--tolerance", type=float,
                         default=_env_float("COLOR_TOLERANCE_PERCENT", 20))
    p_slice.add_argument("--icons", action="store_true",
                         help="also write main.png / tab.png from the first sticker")

    p_clean = sub.add_parser("cleanup", help="flood-fill backdrop removal for single images")
    p_clean.add_argument("inputs", nargs="+", help="image files or folders")
    p_clean.add_argument("-o", "--output-dir", default="cleaned")
    p_clean.add_argument("--color", default=GREEN_SCREEN_HEX,
                         help="backdrop hex colour, or 'auto' to sample the border")
    p_clean.add_argument("--tolerance", type=float,
                         default=_env_float("CLEANUP_TOLERANCE_PERCENT", 18))
    p_clean.add_argument("--erosion", type=int, default=_env_int("EROSION_STRENGTH", 1))
    return parser


def collect_inputs(inputs: List[str], image_service: ImageService) -> List[Path]:
    paths: List[Path] = []
    for item in inputs:
        path = Path(item)
        if path.is_dir():
            paths.extend(image_service.stream_paths(path))
        else:
            paths.append(path)
    return paths


def output_stems(sources: List[str]) -> List[str]:
    """File stem per input; stems shared by several inputs get the input's position appended."""
    stems = [Path(source).stem for source in sources]
    counts = Counter(stems)
    return [f"{stem}_{i}" if counts[stem] > 1 else stem for i, stem in enumerate(stems, 1)]


def _write_cleaned(results: List[BatchResult], output_dir: Path, image_service: ImageService) -> int:
    failures = 0
    stems = output_stems([result.source for result in results])
    for result, stem in tqdm(zip(results, stems), total=len(results), desc="Saving", unit="image"):
        if not result.ok:
            failures += 1
            continue
        img = result.images[0]
        img.path = output_dir / f"{stem}.png"
        image_service.save(img)
    return failures


def _write_stickers(results: List[BatchResult], output_dir: Path, image_service: ImageService,
                    icons: bool = False) -> int:
    failures = 0
    multiple = len(results) > 1
    stems = output_stems([result.source for result in results])
    for result, stem in tqdm(zip(results, stems), total=len(results), desc="Saving", unit="sheet"):
        if not result.ok:
            failures += 1
            continue
        target = output_dir / stem if multiple else output_dir
        for i, img in enumerate(result.images, 1):
            img.path = target / f"{i:02d}.png"
            image_service.save(img)
        if icons and result.images:
            for name, icon in render_icons(result.images[0]).items():
                icon.path = target / f"{name.split('_')[0]}.png"
                image_service.save(icon)
        logger.info(f"{result.source}: wrote {len(result.images)} image(s) to {target}")
    return failures


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    image_service = ImageService()
    sources = collect_inputs(args.inputs, image_service)
    if not sources:
        logger.error("No input images found")
        return 1
    output_dir = Path(args.output_dir)

    with BatchRunner(max_workers=args.workers, image_service=image_service) as runner:
        if args.command == "slice":
            if args.quantity:
                layout = get_sheet_layout(args.quantity)
                rows, cols = layout.rows, layout.cols
            elif args.rows and args.cols:
                rows, cols = args.rows, args.cols
            else:
                logger.error("Give either --quantity or both --rows and --cols")
                return 2
            config = EngineConfig(padding=args.padding,
                                  color_tolerance_percent=args.tolerance)
            logger.info(f"Slicing {len(sources)} sheet(s) as {rows}x{cols}")
            results = runner.run_slice_batch(sources, rows, cols, args.width, args.height,
                                             config=config)
            failures = _write_stickers(results, output_dir, image_service, icons=args.icons)
        else:
            color = None if args.color.lower() == "auto" else args.color
            logger.info(f"Cleaning {len(sources)} image(s)")
            config = EngineConfig(erosion_strength=args.erosion,
                                  color_tolerance_percent=args.tolerance)
            results = runner.run_cleanup_batch(sources, color, config=config)
            failures = _write_cleaned(results, output_dir, image_service)

    if failures:
        logger.error(f"{failures} of {len(results)} input(s) failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
