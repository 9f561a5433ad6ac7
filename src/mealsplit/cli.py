from __future__ import annotations

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from mealsplit.config import Settings, get_settings
from mealsplit.logging import configure_logging, get_logger
from mealsplit.models import OutputFormat, SplitMode
from mealsplit.processor import process_batch, process_single_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "mealsplit",
        description="聚餐分帳計算工具",
        epilog=(
            "範例:\n"
            "  mealsplit --input examples/input.json --output examples/output.json\n"
            "  mealsplit --input examples/input.json --output examples/output.txt --format text\n"
            "  mealsplit --input examples/ --output results/"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--input",
        required=True,
        help="輸入檔案或目錄路徑（支援 JSON 檔案或包含 JSON 檔案的目錄）",
    )
    parser.add_argument(
        "--output",
        required=True,
        help="輸出檔案或目錄路徑",
    )
    parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        help="輸出格式 (json 或 text)",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in SplitMode],
        help="計算方式: auto 依內容判斷, itemized 逐項分帳, netting 收付平衡",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="空帳單或無人分攤的均分項目視為錯誤",
    )
    parser.add_argument(
        "--log-level",
        help="日誌等級 (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def _settings_from_args(args: argparse.Namespace, base: Settings) -> Settings:
    update: dict[str, object] = {}
    if args.format:
        update["output_format"] = OutputFormat(args.format)
    if args.mode:
        update["mode"] = SplitMode(args.mode)
    if args.strict:
        update["strict"] = True
    if args.log_level:
        update["log_level"] = args.log_level
    return base.model_copy(update=update)


async def run(args: argparse.Namespace, settings: Settings) -> int:
    log = get_logger(__name__)
    input_path = Path(args.input)

    if input_path.is_dir():
        print(f"掃描目錄: {input_path}")
        batch = await process_batch(input_path, Path(args.output), settings=settings)
        if not batch.results:
            for error in batch.errors:
                print(f"✗ {error}", file=sys.stderr)
            return 1
        for result in batch.results:
            print(f"✓ {result.message}" if result.success else f"✗ {result.message}: {result.error}")
        print(f"\n處理完成: {batch.processed_files} 成功, {len(batch.results) - batch.processed_files} 失敗")
        return 0 if batch.success else 1

    if args.output.endswith(("/", "\\", os.sep)):
        print("錯誤: 當輸入為檔案時，輸出必須也是檔案路徑", file=sys.stderr)
        return 1

    print(f"處理檔案: {input_path}")
    result = await process_single_file(input_path, Path(args.output), settings=settings)
    if not result.success:
        print(f"✗ 處理失敗: {result.error}", file=sys.stderr)
        return 1

    log.info("cli.done", input=str(input_path), output=args.output)
    print(f"✓ 結果已儲存至: {args.output}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = _settings_from_args(args, get_settings())
    configure_logging(settings.log_level)
    return asyncio.run(run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
