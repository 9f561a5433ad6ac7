from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from mealsplit.config import Settings, get_settings
from mealsplit.errors import MealSplitError
from mealsplit.fileio import dump_json, ensure_directory, read_json_file, scan_json_files, write_text_file
from mealsplit.logging import get_logger
from mealsplit.models import BalanceResult, BillOutput, OutputFormat, SplitMode
from mealsplit.schemas import BalanceResultSchema, BillOutputSchema, decode_bill, decode_netting, detect_mode
from mealsplit.services.report import format_bill_text, format_netting_text
from mealsplit.services.settlement import compute_netting
from mealsplit.services.split import compute_split


Result = Union[BillOutput, BalanceResult]


@dataclass(slots=True)
class ProcessResult:
    success: bool
    message: str
    data: Optional[Result] = None
    error: Optional[str] = None


@dataclass(slots=True)
class BatchResult:
    success: bool
    processed_files: int
    errors: list[str] = field(default_factory=list)
    results: list[ProcessResult] = field(default_factory=list)


def render(raw: object, fmt: OutputFormat, mode: SplitMode, settings: Settings) -> tuple[Result, str]:
    if mode == SplitMode.AUTO:
        mode = detect_mode(raw)

    if mode == SplitMode.NETTING:
        request = decode_netting(raw)
        balance = compute_netting(request.people, request.total_amount)
        get_logger(__name__).info(
            "netting.computed",
            people=len(request.people),
            payments=len(balance.payments),
            total=str(balance.total_amount),
        )
        if fmt == OutputFormat.TEXT:
            return balance, format_netting_text(balance)
        payload = BalanceResultSchema.from_result(balance).model_dump(by_alias=True)
        return balance, dump_json(payload, indent=settings.json_indent)

    bill = decode_bill(raw)
    output = compute_split(bill, strict=settings.strict)
    get_logger(__name__).info(
        "split.computed",
        items=len(bill.items),
        people=len(output.items),
        total=str(output.total_amount),
    )
    if fmt == OutputFormat.TEXT:
        return output, format_bill_text(output, bill)
    payload = BillOutputSchema.from_result(output).model_dump(by_alias=True)
    return output, dump_json(payload, indent=settings.json_indent)


async def process_single_file(
    input_path: Path,
    output_path: Path,
    fmt: Optional[OutputFormat] = None,
    mode: Optional[SplitMode] = None,
    settings: Optional[Settings] = None,
) -> ProcessResult:
    settings = settings or get_settings()
    fmt = fmt or settings.output_format
    mode = mode or settings.mode
    log = get_logger(__name__)

    try:
        raw = await asyncio.to_thread(read_json_file, input_path)
        data, text = render(raw, fmt, mode, settings)
        # BOM пишется только для отчётов по позициям, как и раньше
        bom = settings.write_bom and isinstance(data, BillOutput)
        await asyncio.to_thread(write_text_file, output_path, text, bom=bom)
    except MealSplitError as exc:
        log.warning("file.failed", path=str(input_path), error=exc.message, field=exc.field)
        return ProcessResult(
            success=False,
            message=f"處理檔案失敗: {input_path}",
            error=exc.message,
        )

    log.info("file.processed", path=str(input_path), output=str(output_path), format=fmt.value)
    return ProcessResult(success=True, message=f"成功處理檔案: {input_path}", data=data)


def result_path(input_path: Path, output_dir: Path, fmt: OutputFormat, suffix: str) -> Path:
    extension = ".txt" if fmt == OutputFormat.TEXT else ".json"
    return output_dir / f"{input_path.stem}{suffix}{extension}"


def _batch_outcome(path: Path, outcome: Union[ProcessResult, BaseException]) -> ProcessResult:
    if isinstance(outcome, ProcessResult):
        return outcome
    if not isinstance(outcome, Exception):
        raise outcome
    get_logger(__name__).error("file.crashed", path=str(path), error=repr(outcome))
    return ProcessResult(success=False, message=f"處理檔案失敗: {path}", error=f"{type(outcome).__name__}: {outcome}")


async def process_batch(
    input_dir: Path,
    output_dir: Path,
    fmt: Optional[OutputFormat] = None,
    mode: Optional[SplitMode] = None,
    settings: Optional[Settings] = None,
) -> BatchResult:
    settings = settings or get_settings()
    fmt = fmt or settings.output_format
    log = get_logger(__name__)

    try:
        files = await asyncio.to_thread(scan_json_files, input_dir)
        await asyncio.to_thread(ensure_directory, output_dir)
    except MealSplitError as exc:
        log.warning("batch.failed", path=str(input_dir), error=exc.message)
        return BatchResult(success=False, processed_files=0, errors=[f"批次處理失敗: {exc.message}"])

    if not files:
        return BatchResult(success=False, processed_files=0, errors=["輸入目錄中沒有找到 JSON 檔案"])

    outcomes = await asyncio.gather(
        *(
            process_single_file(path, result_path(path, output_dir, fmt, settings.result_suffix), fmt, mode, settings)
            for path in files
        ),
        return_exceptions=True,
    )
    results = [_batch_outcome(path, outcome) for path, outcome in zip(files, outcomes)]

    errors = [f"{path.name}: {result.error}" for path, result in zip(files, results) if not result.success]
    succeeded = sum(1 for result in results if result.success)

    log.info("batch.finished", path=str(input_dir), succeeded=succeeded, failed=len(errors))
    return BatchResult(
        success=succeeded > 0,
        processed_files=succeeded,
        errors=errors,
        results=list(results),
    )
