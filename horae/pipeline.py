"""Main transformation pipeline."""

import json
import logging
import re
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd
from bs4 import BeautifulSoup, Tag
from tqdm import tqdm

from .config import Config, TransformConfig
from .data import DirectorySource, DocumentSource
from .errors import MalformedMarkupError
from .languages import LanguageCatalog
from .models import DocumentMetadata, RowBlock, TransformResult
from .reference import ReferenceCollector
from .sanitizer import MarkupSanitizer
from .transformer import StructuralTransformer

logger = logging.getLogger(__name__)

ANTE_POST = ("$Ante", "$Post")

# Regex pattern for illegal control characters (except tab, newline, carriage return)
ILLEGAL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f]')


def sanitize_text(text: str) -> str:
    """Remove control characters that may interfere with CSV/Excel.

    Args:
        text: Input text

    Returns:
        Sanitized text
    """
    if not text:
        return text
    return ILLEGAL_CHARS.sub('', text)


def extract_title(markup: str, date_key: str) -> str:
    """Take the document title from its first paragraph.

    Uses the first child of the first ``p``, cut at its first line break.
    Any failure falls back to the date key.

    Args:
        markup: Normalized document
        date_key: Date key of the document

    Returns:
        Title string
    """
    try:
        soup = BeautifulSoup(markup, "html.parser")
        paragraph = soup.find("p")
        if paragraph is None or not paragraph.contents:
            return date_key
        first = paragraph.contents[0]
        title = first.decode_contents() if isinstance(first, Tag) else paragraph.get_text()
        title = re.sub(r"<br\s*/?>.*", "", title, flags=re.S | re.I).strip()
        return title or date_key
    except Exception as e:
        logger.warning(f"Could not extract title for {date_key}, using date as title ({e})")
        return date_key


def query_parameters(date_key: str, config: TransformConfig) -> dict:
    """Query parameters handed to the retrieval collaborator."""
    params = {"date": date_key, "lang1": config.lang1}
    if config.lang2:
        params["lang2"] = config.lang2.rsplit("/", 1)[-1]
    return params


def _process_document_worker(args: tuple) -> TransformResult:
    """Worker for parallel processing. Must be module-level for pickling.

    Args:
        args: (date_key, raw_markup, transform_config_dict, catalog)

    Returns:
        TransformResult of the document
    """
    date_key, raw_markup, transform_config, catalog = args
    pipeline = HorasPipeline(Config(transform=TransformConfig(**transform_config)), catalog=catalog)
    # Each worker call owns its collector
    return pipeline.transform(raw_markup, date_key, ReferenceCollector())


class HorasPipeline:
    """Pipeline turning raw office documents into normalized markup."""

    def __init__(
        self,
        config: Config,
        catalog: Optional[LanguageCatalog] = None,
        source: Optional[DocumentSource] = None,
    ):
        """Initialize the pipeline.

        Args:
            config: Pipeline configuration
            catalog: Language metadata; built from ``config.languages`` when omitted
            source: Where documents and expands are read from; defaults to
                a DirectorySource over ``config.input_dir`` when set
        """
        self.config = config
        if catalog is None:
            catalog = LanguageCatalog.from_settings(
                config.languages.names, config.languages.codes, config.languages.dialog_path
            )
        self.catalog = catalog
        self.sanitizer = MarkupSanitizer(config.transform)
        self.transformer = StructuralTransformer(config.transform, self.catalog)
        if source is None and config.input_dir is not None:
            source = DirectorySource(config.input_dir)
        self.source = source

    def _rebuild(self, raw_markup: str, collector: ReferenceCollector) -> tuple[BeautifulSoup, list[RowBlock]]:
        soup = self.sanitizer.prepare(raw_markup, collector)
        blocks = self.transformer.transform_document(soup)
        return soup, blocks

    def transform(
        self,
        raw_markup: str,
        date_key: str,
        collector: Optional[ReferenceCollector] = None,
    ) -> TransformResult:
        """Transform one document.

        Args:
            raw_markup: Raw office markup
            date_key: Date key identifying the document
            collector: Reference collector for this run; a fresh one is
                created when omitted. A collector still holding another
                run's identifiers is rejected.

        Returns:
            TransformResult with normalized markup and collected identifiers

        Raises:
            MalformedMarkupError: If the markup cannot be normalized safely
            CollectorStateError: If ``collector`` was not reset
        """
        if collector is None:
            collector = ReferenceCollector()
        collector.begin_run(date_key)

        try:
            soup, blocks = self._rebuild(raw_markup, collector)
            self.sanitizer.finalize(soup)
        except MalformedMarkupError as e:
            raise e.with_date_key(date_key) from e

        markup = self.sanitizer.serialize(soup)
        return TransformResult(
            date_key=date_key,
            normalized_markup=markup,
            collected_reference_ids=collector.identifiers,
            title=extract_title(markup, date_key),
            row_blocks=blocks,
        )

    def prepare_expand(self, raw_markup: str, identifier: str) -> str:
        """Normalize a popup document into a fragment for the expands page.

        Args:
            raw_markup: Raw popup markup
            identifier: Expand identifier, e.g. ``$Pater noster``

        Returns:
            Body content with the ``h3`` id set to the identifier
        """
        name = identifier[1:] if identifier[:1] in ("$", "&") else identifier
        collector = ReferenceCollector()
        collector.begin_run(identifier)
        try:
            soup, _ = self._rebuild(raw_markup, collector)
        except MalformedMarkupError as e:
            raise e.with_date_key(identifier) from e
        if len(collector):
            logger.debug(f"Ignoring {len(collector)} nested references in {identifier}")

        heading = soup.find("h3")
        if heading is not None:
            heading["id"] = name.replace(" ", "_")
        self.sanitizer.finalize(soup)

        if soup.body is None:
            return ""
        content = soup.body.decode_contents()
        content = re.sub(r"<br\s*/?>", "<br/>", content, flags=re.I).strip()
        return re.sub(r"(<br/>)+$", "", content).strip()

    def expand_identifiers(self, identifiers: Iterable[str]) -> list[str]:
        """Identifiers to resolve for the expands page, without duplicates."""
        ids = list(identifiers)
        if self.config.transform.antepost:
            ids = list(ANTE_POST) + ids
        return list(dict.fromkeys(ids))

    def resolve_expands(self, identifiers: Iterable[str]) -> str:
        """Fetch and normalize every expand; missing ones are skipped."""
        if self.source is None:
            raise ValueError("No document source configured for expands")
        fragments = []
        for identifier in self.expand_identifiers(identifiers):
            try:
                raw = self.source.fetch_expand(identifier, {"popup": identifier})
            except FileNotFoundError:
                logger.warning(f"No source for expand {identifier}, skipping")
                continue
            fragments.append(self.prepare_expand(raw, identifier))
        return "".join(fragments)

    def _setup_output_dirs(self) -> tuple[Path, Path]:
        """Create output directories based on configuration.

        Returns:
            Tuple of (text_dir, row_tables_dir)
        """
        text_dir = self.config.output.output_dir / "Text"
        rows_dir = self.config.output.output_dir / "Row_Tables"

        if not self.config.output.overwrite and text_dir.exists() and any(text_dir.iterdir()):
            raise FileExistsError(
                f"Output directory {text_dir} is not empty. Change --output or use --overwrite"
            )
        text_dir.mkdir(parents=True, exist_ok=True)
        if self.config.output.save_row_tables:
            rows_dir.mkdir(parents=True, exist_ok=True)
        return text_dir, rows_dir

    def _row_records(self, result: TransformResult) -> list[dict]:
        languages = self.config.transform.languages
        rows = []
        for order, block in enumerate(result.row_blocks, 1):
            row = {"Date_Key": result.date_key, "Row_Order": order, "Kind": block.kind.value}
            for name, content in zip(languages, block.cells):
                row[name] = content
            rows.append(row)
        return rows

    def _save_rows(self, path: Path, rows: list[dict]) -> None:
        rows = [
            {key: sanitize_text(value) if isinstance(value, str) else value for key, value in row.items()}
            for row in rows
        ]
        pd.DataFrame(rows).to_csv(path, index=False)

    def _write_result(self, result: TransformResult, text_dir: Path, rows_dir: Path) -> list[dict]:
        (text_dir / f"{result.date_key}.html").write_text(result.normalized_markup, encoding="utf-8")
        rows = self._row_records(result)
        if self.config.output.save_row_tables and rows:
            self._save_rows(rows_dir / f"{result.date_key}.csv", rows)
        return rows

    def _process_sequential(self, date_keys: list[str]) -> list[TransformResult]:
        results = []
        collector = ReferenceCollector()
        for date_key in tqdm(date_keys, desc="Transforming"):
            raw = self.source.fetch_document(date_key, query_parameters(date_key, self.config.transform))
            collector.reset()
            results.append(self.transform(raw, date_key, collector))
        return results

    def _process_parallel(self, date_keys: list[str]) -> list[TransformResult]:
        workers = self.config.workers
        transform_config = self.config.transform.model_dump()
        tasks = [
            (
                key,
                self.source.fetch_document(key, query_parameters(key, self.config.transform)),
                transform_config,
                self.catalog,
            )
            for key in date_keys
        ]

        results_by_key = {}
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(_process_document_worker, task): task[0] for task in tasks}
            try:
                for future in tqdm(as_completed(futures), total=len(futures), desc=f"Transforming ({workers} workers)"):
                    results_by_key[futures[future]] = future.result()
            except Exception:
                for future in futures:
                    future.cancel()
                raise
        return [results_by_key[key] for key in date_keys]

    def process_directory(self) -> list[DocumentMetadata]:
        """Transform every document of the source and write the outputs.

        Returns:
            Metadata of the processed documents, in date-key order
        """
        if not isinstance(self.source, DirectorySource):
            raise ValueError("process_directory needs a DirectorySource")

        date_keys = self.source.date_keys()
        text_dir, rows_dir = self._setup_output_dirs()
        logger.info(f"Reading {len(date_keys)} documents from {self.source.root}")

        if self.config.workers <= 1:
            results = self._process_sequential(date_keys)
        else:
            results = self._process_parallel(date_keys)

        all_rows = []
        ordo = {}
        identifiers = []
        metadata = []
        for result in results:
            all_rows.extend(self._write_result(result, text_dir, rows_dir))
            ordo[result.date_key] = result.title
            identifiers.extend(result.collected_reference_ids)
            metadata.append(
                DocumentMetadata(result.date_key, result.title, self.source.document_path(result.date_key))
            )

        output_dir = self.config.output.output_dir
        with open(output_dir / "ordo.json", "w", encoding="utf-8") as f:
            json.dump(ordo, f, ensure_ascii=False, indent=2)

        if self.config.output.save_row_tables and all_rows:
            self._save_rows(output_dir / "All_Rows.csv", all_rows)

        expands = self.resolve_expands(identifiers)
        if expands:
            (output_dir / "expands.html").write_text(expands, encoding="utf-8")

        logger.info(f"Normalized documents saved in: {text_dir}")
        return metadata

    def run(self) -> int:
        """Run the pipeline over ``config.input_dir``.

        Returns:
            Number of documents processed
        """
        if not self.config.input_dir:
            raise ValueError("Input directory not specified in configuration")

        if not self.config.input_dir.is_dir():
            raise FileNotFoundError(f"Input directory not found: {self.config.input_dir}")

        return len(self.process_directory())


def transform(
    raw_markup: str,
    date_key: str,
    config: Optional[TransformConfig] = None,
    collector: Optional[ReferenceCollector] = None,
) -> TransformResult:
    """Transform one raw office document.

    Args:
        raw_markup: Raw office markup
        date_key: Date key identifying the document
        config: Transformation options (defaults: Latin/English, splitting on)
        collector: Optional run-scoped reference collector

    Returns:
        TransformResult with ``normalized_markup`` and ``collected_reference_ids``
    """
    pipeline = HorasPipeline(Config(transform=config or TransformConfig()))
    return pipeline.transform(raw_markup, date_key, collector)
