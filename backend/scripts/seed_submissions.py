#!/usr/bin/env python3
import argparse
import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from sqlalchemy import text

from bootstrap import ensure_tables
from database import SessionLocal
from models import Submission
from time_utils import now_tz

DEFAULT_JSON_PATH = Path(__file__).resolve().parents[2] / 'submissions.json'


def parse_created_at(value: Optional[str]) -> datetime:
    if not value:
        return now_tz()
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


def load_records(path: Path) -> List[dict]:
    with open(path, encoding='utf-8') as handle:
        data = json.load(handle)
    if not isinstance(data, list):
        raise ValueError(f'{path} must contain a JSON array of submissions')
    return data


def seed_submissions(db, records: List[dict]) -> int:
    """Replace every submission row with ``records``; the caller commits."""
    db.query(Submission).delete()
    for record in records:
        db.add(Submission(
            id=record['id'],
            project_name=record['projectName'],
            user_name=record['userName'],
            project_url=record['projectUrl'],
            image_url=record['imageUrl'],
            created_at=parse_created_at(record.get('createdAt')),
        ))
    db.flush()
    if db.bind.dialect.name == 'postgresql':
        # explicit ids leave the serial sequence behind
        db.execute(text(
            "SELECT setval(pg_get_serial_sequence('submissions', 'id'), COALESCE(MAX(id), 1)) FROM submissions"
        ))
    return len(records)


def main():
    parser = argparse.ArgumentParser(description='Load submissions.json into the submissions table.')
    parser.add_argument('path', nargs='?', default=str(DEFAULT_JSON_PATH))
    args = parser.parse_args()

    json_path = Path(args.path)
    print(f'Reading JSON from {json_path}')
    records = load_records(json_path)

    ensure_tables()
    db = SessionLocal()
    try:
        print('Clearing existing submissions and inserting rows...')
        inserted = seed_submissions(db, records)
        db.commit()
        print(f'Done. Inserted {inserted} rows.')
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == '__main__':
    main()
