from __future__ import annotations

import argparse
import dataclasses
import logging

import requests
from dotenv import load_dotenv

from .config import Config, load_config
from .engines.base import TranslationBackend
from .engines.google_v3 import GoogleTranslateV3, resolve_project_id
from .engines.http_batch import BatchTranslationClient
from .logging import attach_file_logging, configure_logging
from .pipeline import TranslationPipeline


log = logging.getLogger("htmltrans")


def build_backend(cfg: Config, session: requests.Session | None = None) -> TranslationBackend:
    if cfg.backend == "google":
        project_id = resolve_project_id(cfg.gcp_project_id, cfg.gcp_credentials_path)
        if not project_id:
            raise SystemExit("GCP project id is required (set GCP_PROJECT_ID or ensure in credentials)")
        return GoogleTranslateV3(
            project_id=project_id,
            location=cfg.gcp_location,
            credentials_path=cfg.gcp_credentials_path,
        )
    if not cfg.api_url:
        raise SystemExit("TRANSLATION_API_URL is required for the http backend")
    return BatchTranslationClient(
        api_url=cfg.api_url,
        session=session or requests.Session(),
        user_agent=cfg.user_agent,
        timeout=cfg.timeout,
        source_field=cfg.source_field,
        target_field=cfg.target_field,
    )


def _apply_overrides(cfg: Config, args: argparse.Namespace) -> Config:
    overrides = {
        "lang": args.lang,
        "html_dir": args.html_dir,
        "dist_dir": args.dist_dir,
        "output_path": args.output_path,
        "cache_path": args.cache_path,
        "report_path": args.report_path,
        "chunk_size": args.chunk_size,
    }
    return dataclasses.replace(cfg, **{k: v for k, v in overrides.items() if v is not None})


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Translate a tree of HTML documents")
    parser.add_argument("--lang", default=None, help="target language (default: TRANSLATION_LANG)")
    parser.add_argument("--html-dir", default=None, help="source document tree")
    parser.add_argument("--dist-dir", default=None, help="output document tree")
    parser.add_argument(
        "--output-path",
        default=None,
        help="build output destination; the run is skipped unless it names the target language",
    )
    parser.add_argument("--cache-path", default=None)
    parser.add_argument("--report-path", default=None, help="where to write the skipped-document list")
    parser.add_argument("--chunk-size", type=int, default=None)
    parser.add_argument("--rebuild-only", action="store_true", help="use cached translations only; no MT calls")
    parser.add_argument("--log-file", default=None)
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
    )
    args = parser.parse_args(argv)

    if args.chunk_size is not None and args.chunk_size <= 0:
        parser.error("--chunk-size must be positive")

    load_dotenv()
    configure_logging(getattr(logging, args.log_level))
    if args.log_file:
        attach_file_logging(args.log_file)

    # rebuild-only never contacts the service, so the api url is optional
    cfg = _apply_overrides(load_config(require_api_url=not args.rebuild_only), args)

    backend = None if args.rebuild_only else build_backend(cfg)
    pipeline = TranslationPipeline(cfg, backend)
    report = pipeline.run(rebuild_only=args.rebuild_only)
    if not report.skipped:
        log.info("translation JSON written to %s", report.locale_path)


if __name__ == "__main__":
    main()
