# app/services/storage.py
"""
Persistence sink for accepted analyses.

The pipeline never reads from here; records are written once and left to
whatever consumes them downstream.
"""
import json
import os
import uuid
from datetime import datetime, timezone
from io import BytesIO
from typing import Any, Dict

import boto3


def _new_record_id() -> str:
    return str(uuid.uuid4())


class LocalStorage:
    def __init__(self, base_path: str):
        self.base_path = base_path
        os.makedirs(self.base_path, exist_ok=True)

    def save_record(self, record_id: str, record: Dict[str, Any]) -> str:
        path = os.path.join(self.base_path, f"{record_id}.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump(record, f, ensure_ascii=False, indent=2)
        return path


class S3Storage:
    def __init__(self, bucket_name, region='us-east-1', prefix='analyses/'):
        self.s3 = boto3.resource('s3', region_name=region)
        self.bucket = self.s3.Bucket(bucket_name)
        self.prefix = prefix

    def save_record(self, record_id: str, record: Dict[str, Any]) -> str:
        """Save record to S3 and return its URL"""
        key = f"{self.prefix}{record_id}.json"
        body = BytesIO(json.dumps(record, ensure_ascii=False).encode("utf-8"))
        self.bucket.upload_fileobj(
            body,
            key,
            ExtraArgs={'ACL': 'private', 'ContentType': 'application/json'}
        )
        return f"s3://{self.bucket.name}/{key}"


class StorageService:
    def __init__(self, app=None):
        self.app = app
        self.storage = None

        if app:
            self.init_app(app)

    def init_app(self, app):
        if app.config['ENV'] == 'production':
            self.storage = S3Storage(app.config['S3_BUCKET'], app.config['AWS_REGION'])
        else:
            self.storage = LocalStorage(base_path=app.config['RESUME_STORAGE_PATH'])

    def save_analysis(self, metadata: Dict[str, Any], file_name: str, file_type: str,
                      segments: Dict[str, str]) -> str:
        """Persist an accepted analysis and return its id. Metadata is stored as given."""
        record_id = _new_record_id()
        record = {
            "id": record_id,
            **metadata,
            "fileName": file_name,
            "fileType": file_type,
            "segments": segments,
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        self.storage.save_record(record_id, record)
        return record_id
