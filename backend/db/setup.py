"""
Create the case graph tables in a PostgreSQL database.

Usage:
    python -m db.setup              # uses DATABASE_URL from .env
    python -m db.setup <url>        # explicit connection string
"""

import os
import sys
from pathlib import Path

import psycopg2
from dotenv import load_dotenv

load_dotenv()

SCHEMA_FILE = Path(__file__).parent / "schema.sql"


def run_schema(database_url: str) -> list[str]:
    print("Connecting to database...")
    conn = psycopg2.connect(database_url)
    conn.autocommit = True
    try:
        with conn.cursor() as cur:
            print(f"Applying {SCHEMA_FILE.name}...")
            cur.execute(SCHEMA_FILE.read_text())

            cur.execute("""
                SELECT column_name, data_type
                FROM information_schema.columns
                WHERE table_schema = 'public' AND table_name = 'case_graphs'
                ORDER BY ordinal_position;
            """)
            columns = [f"{name} {dtype}" for name, dtype in cur.fetchall()]
    finally:
        conn.close()

    print(f"case_graphs columns: {', '.join(columns)}")
    print("Done. Database is ready.")
    return columns


if __name__ == "__main__":
    url = sys.argv[1] if len(sys.argv) > 1 else os.getenv("DATABASE_URL", "")
    if not url:
        print("ERROR: No DATABASE_URL provided.")
        print("Either set it in .env or pass as argument:")
        print("  python -m db.setup 'postgresql://...'")
        sys.exit(1)
    try:
        run_schema(url)
    except psycopg2.Error as e:
        print(f"ERROR: {e}")
        sys.exit(1)
