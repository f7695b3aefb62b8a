"""Generate database and customer-id encryption keys."""

from __future__ import annotations

import argparse
import secrets
from pathlib import Path

from lifepolicy_app.core.config import DEFAULT_DB_KEY_ENV, DEFAULT_ENCRYPTION_KEY_ENV
from lifepolicy_app.core.crypto import CryptoService


def render_lines(db_key: str, encryption_key: str, export: bool = False) -> list[str]:
    prefix = "export " if export else ""
    return [
        f"{prefix}{DEFAULT_DB_KEY_ENV}='{db_key}'",
        f"{prefix}{DEFAULT_ENCRYPTION_KEY_ENV}='{encryption_key}'",
    ]


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate lifepolicy runtime keys.")
    parser.add_argument("--write-env", default=None, help="Env file to write, e.g. config/runtime.env.")
    parser.add_argument("--export", action="store_true", help="Prefix lines with 'export'.")
    parser.add_argument("--stdout", action="store_true", help="Also print the lines.")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing env file.")
    args = parser.parse_args()

    lines = render_lines(
        secrets.token_urlsafe(48),
        CryptoService.generate_base64_key(),
        export=args.export,
    )

    if args.write_env:
        target_path = Path(args.write_env)
        if target_path.exists() and not args.force:
            print(f"[INFO] key file already exists: {target_path}")
            return
        target_path.parent.mkdir(parents=True, exist_ok=True)
        target_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        print(f"[INFO] key file written: {target_path}")

    if args.stdout:
        print("\n".join(lines))


if __name__ == "__main__":
    main()
