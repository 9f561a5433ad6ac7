from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from mealsplit.errors import InputFileError, InvalidInputShape, OutputWriteError


BOM = "\ufeff"


def read_json_file(path: Path) -> Any:
    try:
        # utf-8-sig также принимает файлы с BOM, которые пишет сам mealsplit
        content = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as exc:
        raise InputFileError(f"檔案不存在: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise InputFileError(f"讀取檔案失敗: {path}: {exc}") from exc

    try:
        return json.loads(content)
    except (ValueError, RecursionError) as exc:
        # JSONDecodeError тоже ValueError; сюда же попадают слишком длинные числа
        raise InvalidInputShape(f"JSON 格式錯誤: {exc}") from exc


def ensure_directory(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputWriteError(f"建立目錄失敗: {path}: {exc}") from exc


def write_text_file(path: Path, text: str, *, bom: bool = True) -> None:
    ensure_directory(path.parent)
    try:
        path.write_text((BOM if bom else "") + text, encoding="utf-8")
    except OSError as exc:
        raise OutputWriteError(f"寫入檔案失敗: {path}: {exc}") from exc


def dump_json(data: Any, *, indent: int = 2) -> str:
    return json.dumps(data, ensure_ascii=False, indent=indent)


def scan_json_files(directory: Path) -> list[Path]:
    if not directory.exists():
        raise InputFileError(f"目錄不存在: {directory}")
    try:
        entries = list(directory.iterdir())
    except OSError as exc:
        raise InputFileError(f"讀取目錄失敗: {directory}: {exc}") from exc
    return sorted(p for p in entries if p.is_file() and p.suffix.lower() == ".json")
