"""Import boards exported from the legacy store.

Usage:
    python -m app.scripts.migrate_legacy export.json [--user-map users.json]

The export is either a list of board documents or ``{"boards": [...]}``.
The optional user map is a JSON object ``{legacy_user_id: user_id}``.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from app.core.database import Base, SessionLocal, engine
from app.core.errors import BoardError
from app.core.logging import configure_logging
from app.services.migration import import_board_document

logger = logging.getLogger(__name__)


def load_documents(path: Path) -> list:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("boards", [])
    return data


def _title_of(document):
    return document.get("title") if isinstance(document, dict) else None


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Import legacy board documents")
    ap.add_argument("export", type=Path, help="JSON export of legacy boards")
    ap.add_argument("--user-map", type=Path, default=None, help="JSON {legacy_id: user_id}")
    args = ap.parse_args(argv)

    configure_logging()
    Base.metadata.create_all(bind=engine)
    user_map = json.loads(args.user_map.read_text(encoding="utf-8")) if args.user_map else {}

    imported = failed = 0
    db = SessionLocal()
    try:
        for document in load_documents(args.export):
            try:
                import_board_document(db, document, user_map)
                imported += 1
            except (BoardError, SQLAlchemyError, AttributeError, TypeError) as e:
                db.rollback()
                failed += 1
                reason = e.message if isinstance(e, BoardError) else f"{type(e).__name__}: {e}"
                logger.error(f"Board {_title_of(document)!r} not imported: {reason}")
    finally:
        db.close()

    logger.info(f"Import finished: {imported} imported, {failed} failed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
