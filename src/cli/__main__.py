# src/cli/__main__.py
import sys, json
from pathlib import Path

from pydantic import ValidationError
from sqlmodel import Session

from src.core.merge import MergeError, merge_snapshots
from src.server.db.session import engine, init_db
from src.server.schemas.backup import BackupIn, ImportMode
from src.services.backup_service import ImportFailed, export_backup, import_backup
from src.services.storage import backup_filename

USAGE = """Usage:
  python -m src.cli merge <current.json> <imported.json> [--out=merged.json]
  python -m src.cli summary <current.json> <imported.json>
  python -m src.cli export [--out=backup.json]
  python -m src.cli import <backup.json> [--mode=merge|overwrite]

Examples:
  python -m src.cli summary data/current.json HB_Backup_2025-03-14.json
  python -m src.cli import HB_Backup_2025-03-14.json --mode=merge
"""

def _load_json(p: str):
    try:
        return json.loads(Path(p).read_text(encoding="utf-8"))
    except Exception as e:
        print(f"Error reading JSON '{p}': {e}", file=sys.stderr)
        sys.exit(2)

def _load_backup(p: str) -> BackupIn:
    try:
        return BackupIn.model_validate(_load_json(p))
    except ValidationError as e:
        print(f"Ogiltig backupfil '{p}':\n{e}", file=sys.stderr)
        sys.exit(2)

def _option(args, name: str, default=None):
    prefix = f"--{name}="
    for arg in args:
        if arg.startswith(prefix):
            return arg.split("=", 1)[1]
    return default

def _write_json(data, out_path):
    text = json.dumps(data, indent=2, ensure_ascii=False)
    if out_path:
        Path(out_path).write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text + "\n")

def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        print(USAGE, file=sys.stderr); sys.exit(1)

    cmd = argv[0].lower()
    positional = [a for a in argv[1:] if not a.startswith("--")]
    options = [a for a in argv[1:] if a.startswith("--")]

    if cmd in ("merge", "summary"):
        if len(positional) < 2:
            print(USAGE, file=sys.stderr); sys.exit(1)
        current = _load_json(positional[0])
        imported = _load_backup(positional[1]).to_snapshot()
        try:
            result = merge_snapshots(current, imported)
        except MergeError as e:
            print(str(e), file=sys.stderr)
            sys.exit(3)
        if cmd == "summary":
            print(result.summary)
            return
        print(result.summary, file=sys.stderr)
        _write_json(result.merged, _option(options, "out"))
        return

    if cmd == "export":
        init_db()
        with Session(engine) as session:
            data = export_backup(session=session)
        out_path = _option(options, "out", backup_filename())
        _write_json(data, out_path)
        print(f"Backup exporterad till {out_path}", file=sys.stderr)
        return

    if cmd == "import":
        if not positional:
            print(USAGE, file=sys.stderr); sys.exit(1)
        payload = _load_backup(positional[0])
        try:
            mode = ImportMode(_option(options, "mode", "merge"))
        except ValueError:
            print(USAGE, file=sys.stderr); sys.exit(1)
        init_db()
        with Session(engine) as session:
            try:
                result = import_backup(payload=payload, mode=mode, session=session)
            except ImportFailed as e:
                print(e.message, file=sys.stderr)
                sys.exit(3)
        print(result["summary"])
        return

    print(USAGE, file=sys.stderr); sys.exit(1)

if __name__ == "__main__":
    main()
