#!/usr/bin/env python3
"""
Chargeback API: DynamoDB table setup script

Supports:
- create: Create the chargebacks table with its secondary indexes
- drop: Delete the chargebacks table
- reset: Drop and recreate the table
- verify: Check the table exists and has the expected indexes

Usage:
    DYNAMODB_ENDPOINT=http://localhost:8000 uv run db-create
    DYNAMODB_ENDPOINT=http://localhost:8000 uv run db-verify
    uv run python scripts/setup_dynamodb.py --yes drop

Environment Variables:
- DYNAMODB_ENDPOINT: Custom endpoint (DynamoDB Local); empty for AWS
- DYNAMODB_TABLE_NAME: Table name (default: chargebacks)
- AWS_REGION / DYNAMODB_REGION: Region (default: us-east-1)
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from chargeback_api.core.config import DynamoDBConfig, get_settings
from chargeback_api.core.errors import StorageError
from chargeback_api.persistence.dynamodb import (
    create_dynamodb_resource,
    create_table,
    describe_table,
    drop_table,
)


class TableSetup:
    """Handles DynamoDB table setup for the Chargeback API."""

    def __init__(self, config: DynamoDBConfig):
        self.config = config
        self.resource = create_dynamodb_resource(config)

    def _target(self) -> str:
        endpoint = self.config.endpoint or f"AWS ({self.config.region})"
        return f"{self.config.table_name} @ {endpoint}"

    def create(self) -> int:
        """Create the table if it does not exist."""
        print(f"Creating table {self._target()}...")
        try:
            created = create_table(self.config, self.resource)
        except StorageError as e:
            print(f"ERROR: {e.message}")
            return 1

        if created:
            print("  Table created.")
        else:
            print("  Table already exists, nothing to do.")
        return 0

    def drop(self, force: bool = False) -> int:
        """Delete the table."""
        if not force:
            answer = input(f"Drop table {self._target()}? [y/N] ")
            if answer.strip().lower() != "y":
                print("Aborted.")
                return 1

        print(f"Dropping table {self._target()}...")
        try:
            dropped = drop_table(self.config, self.resource)
        except StorageError as e:
            print(f"ERROR: {e.message}")
            return 1

        if dropped:
            print("  Table dropped.")
        else:
            print("  Table does not exist, nothing to do.")
        return 0

    def reset(self, force: bool = False) -> int:
        """Drop and recreate the table."""
        result = self.drop(force=force)
        if result != 0:
            return result
        return self.create()

    def verify(self) -> int:
        """Verify the table and its indexes."""
        print(f"Verifying table {self._target()}...")
        try:
            description = describe_table(self.config, self.resource)
        except StorageError as e:
            print(f"ERROR: {e.message}")
            return 1

        if description is None:
            print("\nVerification FAILED:")
            print("  - Table does not exist")
            return 1

        print(f"  [OK] Table exists (status: {description['status']})")

        expected = sorted(
            [
                self.config.transaction_index,
                self.config.merchant_index,
                self.config.status_index,
            ]
        )
        missing = [name for name in expected if name not in description["indexes"]]
        if missing:
            print("\nVerification FAILED:")
            print(f"  - Missing indexes: {', '.join(missing)}")
            return 1

        print(f"  [OK] Indexes: {', '.join(description['indexes'])}")
        print(f"  [OK] Item count: {description['item_count']}")
        print("\nVerification PASSED.")
        return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Chargeback API - DynamoDB Table Setup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--endpoint",
        help="DynamoDB endpoint URL (overrides DYNAMODB_ENDPOINT)",
    )
    parser.add_argument(
        "--table-name",
        help="Table name (overrides DYNAMODB_TABLE_NAME)",
    )
    parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Skip confirmation prompts",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.add_parser("create", help="Create the table")
    subparsers.add_parser("drop", help="Drop the table")
    subparsers.add_parser("reset", help="Drop and recreate the table")
    subparsers.add_parser("verify", help="Verify table setup")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    overrides = {}
    if args.endpoint:
        overrides["endpoint"] = args.endpoint
    if args.table_name:
        overrides["table_name"] = args.table_name
    config = get_settings().dynamodb.model_copy(update=overrides)

    setup = TableSetup(config)

    if args.command == "create":
        return setup.create()
    elif args.command == "drop":
        return setup.drop(force=args.yes)
    elif args.command == "reset":
        return setup.reset(force=args.yes)
    elif args.command == "verify":
        return setup.verify()

    return 0


if __name__ == "__main__":
    sys.exit(main())
