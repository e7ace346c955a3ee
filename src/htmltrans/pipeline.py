from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterator

from .cache import TranslationCache
from .collector import BatchCollector, FlushReport
from .config import Config
from .engines.base import TranslationBackend
from .minify import MinifyError, minify_document
from .resolver import resolve_tokens
from .run_report import RunReport, write_locale_file, write_report_file
from .walker import DocumentWalker, WalkResult, parse_document, serialize_document


log = logging.getLogger("htmltrans.pipeline")


def should_run(output_path: str | Path, lang: str) -> bool:
    return lang in str(output_path)


def iter_html_files(root: str | Path) -> Iterator[Path]:
    root = Path(root)
    if not root.is_dir():
        return
    for path in sorted(root.rglob("*.html")):
        if path.is_file():
            yield path


class TranslationPipeline:
    """Walk the source tree, translate what the cache lacks, resolve the output tree.

    The whole source tree is walked and every pending chunk sent before any
    output document is resolved.
    """

    def __init__(
        self,
        cfg: Config,
        backend: TranslationBackend | None,
        cache: TranslationCache | None = None,
        minifier: Callable[[str], str] = minify_document,
    ) -> None:
        self.cfg = cfg
        self.backend = backend
        self.cache = cache if cache is not None else TranslationCache(cfg.cache_path)
        self.collector = BatchCollector(self.cache, chunk_size=cfg.chunk_size)
        self.walker = DocumentWalker(self.collector)
        self.minifier = minifier
        self.html_dir = Path(cfg.html_dir)
        self.dist_dir = Path(cfg.dist_dir)

    def _read_document(self, path: Path, report: RunReport) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            log.warning("not valid UTF-8, skipping %s: %s", path, exc)
            report.anomalies.append(str(path))
            return None

    def process_document(self, path: Path, report: RunReport) -> WalkResult | None:
        original = self._read_document(path, report)
        if original is None:
            return None
        try:
            original = self.minifier(original)
        except MinifyError as exc:
            log.warning("minify failed, skipping %s: %s", path, exc)
            report.anomalies.append(str(path))
            return None

        rel = path.relative_to(self.html_dir)
        soup = parse_document(original)
        result = self.walker.walk(soup, rel.as_posix())

        out_path = self.dist_dir / rel
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(serialize_document(soup, original), encoding="utf-8")
        report.documents += 1
        return result

    def extract_tree(self, report: RunReport) -> None:
        for path in iter_html_files(self.html_dir):
            self.process_document(path, report)
        log.info(
            "extracted documents=%s pending=%s anomalies=%s",
            report.documents,
            len(self.collector.pending),
            len(report.anomalies),
        )

    def translate(self, report: RunReport, rebuild_only: bool = False) -> None:
        if rebuild_only:
            missing = self.collector.discard_pending()
            report.flush = FlushReport(requested=len(missing), failed_keys=missing)
            if missing:
                log.warning("rebuild-only: %s fragments have no cached translation", len(missing))
            return
        if self.backend is None:
            raise RuntimeError("a translation backend is required unless rebuild_only is set")
        report.flush = self.collector.flush(self.backend, self.cfg.source_lang, self.cfg.lang)

    def resolve_document(self, path: Path, report: RunReport) -> None:
        content = self._read_document(path, report)
        if content is None:
            return
        resolved = resolve_tokens(content, self.cache, self.cfg.use_translation)
        rel = path.relative_to(self.dist_dir).as_posix()
        if resolved.unresolved:
            log.warning("%s: unresolved tokens=%s", rel, len(resolved.unresolved))
            report.unresolved[rel] = resolved.unresolved

        final = resolved.text
        try:
            final = self.minifier(final)
        except MinifyError as exc:
            log.warning("minify failed, writing unminified %s: %s", path, exc)
            report.unminified.append(str(path))
        path.write_text(final, encoding="utf-8")

    def resolve_tree(self, report: RunReport) -> None:
        for path in iter_html_files(self.dist_dir):
            self.resolve_document(path, report)

    def run(self, rebuild_only: bool = False) -> RunReport:
        report = RunReport()
        if not should_run(self.cfg.trigger_path, self.cfg.lang):
            log.info("skipping translation for non-%s output %s", self.cfg.lang, self.cfg.trigger_path)
            report.skipped = True
            return report

        log.info("running translation for %s: %s -> %s", self.cfg.lang, self.html_dir, self.dist_dir)
        self.extract_tree(report)
        self.translate(report, rebuild_only=rebuild_only)
        self.resolve_tree(report)

        report.locale_path = write_locale_file(
            self.collector.locale(self.cfg.use_translation), self.dist_dir, self.cfg.lang
        )
        self.cache.save()
        path = write_report_file(report.anomalies, self.cfg.report_path)
        log.info("anomaly list written to %s", path)
        log.info("translation run done: %s", report.summary())
        return report
