"""Command-line administration for the learning management backend.

Usage:
    python main.py migrate
    python main.py create-user <fullName> <userType> <email> <password>
    python main.py stats

Commands work directly on the document store configured in config.py,
so they can be run while the API server is stopped.
"""

import logging
import sys
from typing import List, Optional

from config import DATABASE_PATH
from core.document_store import DocumentStore
from core.exceptions import LMSError
from core.logging_config import setup_logging
from schemas.document import COLLECTIONS
from schemas.user import CreateUserRequest
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)


def print_banner() -> None:
    """Print program banner."""
    print("=" * 70)
    print("  Learning Management Backend - Admin")
    print("=" * 70)
    print()


def print_usage() -> None:
    """Print available commands."""
    print("Available commands:")
    print("  migrate                                         - normalize the stored document")
    print("  create-user <fullName> <userType> <email> <pw>  - add a user (Admin, SME, Trainee)")
    print("  stats                                           - record counts per collection")
    print()


def cmd_migrate(store: DocumentStore) -> int:
    store.migrate()
    print(f"✅ Document migrated: {store.path}")
    return 0


def cmd_create_user(store: DocumentStore, args: List[str]) -> int:
    if len(args) != 4:
        print("❌ create-user needs: <fullName> <userType> <email> <password>")
        return 2
    full_name, user_type, email, password = args
    user = UserManager(store).create_user(
        CreateUserRequest(
            full_name=full_name, user_type=user_type, email=email, password=password
        )
    )
    print(f"✅ Created {user.user_type.value} {user.full_name} with userId {user.user_id}")
    return 0


def cmd_stats(store: DocumentStore) -> int:
    document = store.load()
    print(f"Data file: {store.path}")
    for name in COLLECTIONS:
        print(f"  {name:<12} {len(document.get_collection(name))}")
    archived = sum(1 for u in document.users if u.get("status") == "Archived")
    print(f"  (archived users: {archived})")
    return 0


def main(argv: Optional[List[str]] = None, store: Optional[DocumentStore] = None) -> int:
    """Main entry point.

    Args:
        argv: Command and its arguments; defaults to sys.argv[1:].
        store: Document store to operate on; defaults to the configured one.

    Returns:
        Process exit code.
    """
    setup_logging()
    args = sys.argv[1:] if argv is None else argv
    store = store or DocumentStore(DATABASE_PATH)

    print_banner()
    if not args:
        print_usage()
        return 2

    command, rest = args[0], args[1:]
    try:
        if command == "migrate":
            return cmd_migrate(store)
        if command == "create-user":
            return cmd_create_user(store, rest)
        if command == "stats":
            return cmd_stats(store)
    except LMSError as e:
        logger.error("%s failed: %s", command, e.message)
        print(f"\n❌ {e.message}\n")
        return 1

    print(f"❌ Unknown command: {command}\n")
    print_usage()
    return 2


if __name__ == "__main__":
    sys.exit(main())
