#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Genera un token JWT con rol admin para usar el panel de administración.
Requiere JWT_SECRET en el entorno (o en .env).

Ejecutar: python scripts/issue_admin_token.py --email yo@example.com --days 7
"""
import argparse
import sys
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

BACKEND_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BACKEND_DIR / ".env")
sys.path.insert(0, str(BACKEND_DIR))

from portfolio_backend.security import ADMIN_ROLE, create_access_token  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Emitir un token de administrador")
    parser.add_argument("--subject", default="admin", help="Identificador del usuario (claim id)")
    parser.add_argument("--email", default=None, help="Email a incluir en el token")
    parser.add_argument("--days", type=int, default=7, help="Días de validez")
    args = parser.parse_args()

    claims = {"email": args.email} if args.email else None
    try:
        token = create_access_token(
            args.subject,
            role=ADMIN_ROLE,
            expires_delta=timedelta(days=args.days),
            additional_claims=claims,
        )
    except RuntimeError as e:
        print(f"[ERROR] {e}")
        return 1

    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())
