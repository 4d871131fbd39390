#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Borra visitantes cuya última visita es anterior a N días.
La aplicación nunca borra visitantes por sí sola; esta es la purga manual.

Ejecutar: python scripts/purge_visitors.py --days 365 [--dry-run]
"""
import argparse
import sys
from datetime import timedelta
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BACKEND_DIR))

from portfolio_backend.database import SessionLocal  # noqa: E402
from portfolio_backend.models.visitor import Visitor  # noqa: E402
from portfolio_backend.utils import utcnow  # noqa: E402


def purge_visitors(db, days: int, dry_run: bool = False) -> int:
    """Devuelve la cantidad de visitantes borrados (o que se borrarían)."""
    cutoff = utcnow() - timedelta(days=days)
    query = db.query(Visitor).filter(Visitor.last_visit < cutoff)
    count = query.count()
    if not dry_run and count:
        query.delete(synchronize_session=False)
        db.commit()
    return count


def main() -> int:
    parser = argparse.ArgumentParser(description="Purgar visitantes antiguos")
    parser.add_argument("--days", type=int, required=True, help="Antigüedad mínima de la última visita")
    parser.add_argument("--dry-run", action="store_true", help="Solo contar, no borrar")
    args = parser.parse_args()

    if args.days < 1:
        print("[ERROR] --days debe ser mayor a 0")
        return 1

    db = SessionLocal()
    try:
        count = purge_visitors(db, args.days, dry_run=args.dry_run)
    except Exception as e:
        db.rollback()
        print(f"[ERROR] Error de base de datos: {e}")
        return 1
    finally:
        db.close()

    action = "se borrarían" if args.dry_run else "borrados"
    print(f"[OK] {count} visitantes {action} (última visita hace más de {args.days} días)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
