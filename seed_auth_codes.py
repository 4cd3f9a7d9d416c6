# seed_auth_codes.py
"""
Write the provisioned authorization codes into the record store.

Usage:
    python seed_auth_codes.py SILL2025 OWNER123 ADMIN456

With no arguments the DEFAULT_AUTH_CODES setting is written.
"""
import sys

from sqlmodel import Session

from app.core.config import get_settings
from app.database import create_db_and_tables, engine
from app.repositories.community_repo import CommunityRepository
from app.repositories.kv_repo import KVRepository


def seed(codes: list[str]) -> list[str]:
    create_db_and_tables()
    repo = CommunityRepository(KVRepository())
    with Session(engine) as session:
        repo.put_auth_codes(session, codes)
        session.commit()
    return codes


def main():
    codes = [c.strip() for c in sys.argv[1:] if c.strip()]
    if not codes:
        codes = list(get_settings().DEFAULT_AUTH_CODES)

    print(f"Writing {len(codes)} authorization code(s)...")
    seed(codes)
    print("Done: valid_auth_codes updated.")


if __name__ == "__main__":
    main()
