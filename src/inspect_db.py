"""
Mostra o conteúdo do banco local sem subir o servidor:

    python src/inspect_db.py [--db data/app.db] [--limit 10]
"""
import argparse
import os
import sys

from core.config import settings
from core.db import StorageError, SubmissionStore, TABLES

PREVIEW_CHARS = 120


def read_only_url(path: str) -> str:
    return f"sqlite:///file:{os.path.abspath(path)}?mode=ro&uri=true"


def print_rows(rows, columns):
    if not rows:
        print("  (empty)")
        return
    widths = {c: max(len(c), *(len(str(r.get(c, ""))) for r in rows)) for c in columns}
    print("  " + " | ".join(c.ljust(widths[c]) for c in columns))
    print("  " + "-+-".join("-" * widths[c] for c in columns))
    for r in rows:
        print("  " + " | ".join(str(r.get(c, "")).ljust(widths[c]) for c in columns))


def preview(rows, column, size=PREVIEW_CHARS):
    for r in rows:
        if r.get(column):
            r[column] = r[column][:size]
    return rows


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Resumo das submissões gravadas.")
    parser.add_argument("--db", default=os.path.join(settings.DATA_DIR, "app.db"))
    parser.add_argument("--limit", type=int, default=10)
    args = parser.parse_args(argv)

    if not os.path.isfile(args.db):
        print(f"Could not open database at {args.db}", file=sys.stderr)
        return 1

    store = SubmissionStore(read_only_url(args.db))
    try:
        counts = store.counts()
        print("Database:", args.db)
        print("Counts:")
        for name in TABLES:
            print(f"  {name + ':':15} {counts[name]}")

        columns = {
            "registrations": ("id", "name", "email", "contact", "receivedAt"),
            "contacts": ("id", "name", "email", "message", "receivedAt"),
            "scores": ("id", "score", "details", "receivedAt"),
            "mails": ("id", "recipients", "subject", "status", "sentAt", "receivedAt", "error"),
        }
        for name in TABLES:
            print(f"\nRecent {name} (latest {args.limit}):")
            rows = store.recent(name, args.limit)
            if name == "contacts":
                rows = preview(rows, "message")
            print_rows(rows, columns[name])
    except StorageError as e:
        print(f"Query error: {e}", file=sys.stderr)
        return 1
    finally:
        store.engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
