"""
Populate the catalog with content items from a JSON file.
Optionally grants the admin role to a user so the admin pages can be used.
"""

import sys
from pathlib import Path

# Add parent directory to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import argparse
import json
import logging
from typing import Dict, List, Optional

from pydantic import ValidationError

from cineverse_catalog_service.catalog import ContentItem
from cineverse_catalog_service.models import Base
from cineverse_catalog_service.repos import ContentRepository, UserRepository

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def load_items(input_path: Path) -> List[Dict]:
    """
    Load catalog items from a JSON file.

    Args:
        input_path: File holding a list of items, or an object with a ``content`` list

    Returns:
        Raw item documents
    """
    with open(input_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get('content', [])

    if not isinstance(data, list):
        raise ValueError(f"{input_path} must contain a list of content items")

    logger.info(f"✓ Loaded {len(data)} items from {input_path}")
    return data


def populate_catalog(
    repository: ContentRepository,
    documents: List[Dict],
    replace: bool = False
) -> Dict[str, int]:
    """
    Store items in the catalog.

    Items with an ``id`` are written under that ID (overwriting), the rest
    get generated IDs. Malformed items are skipped.

    Args:
        repository: Content repository
        documents: Raw item documents
        replace: Delete the existing catalog first

    Returns:
        Counts of cleared, imported, created and skipped items
    """
    stats = {'cleared': 0, 'imported': 0, 'created': 0, 'skipped': 0}

    if replace:
        stats['cleared'] = repository.clear_content()
        logger.info(f"✓ Cleared {stats['cleared']} existing items")

    for index, document in enumerate(documents):
        if not isinstance(document, dict):
            logger.warning(f"Skipping item {index}: not an object")
            stats['skipped'] += 1
            continue

        content_id = document.get('id')
        try:
            item = ContentItem.model_validate({**document, 'id': content_id or 'new'})
        except ValidationError as e:
            logger.warning(f"Skipping item {index} ({document.get('title')}): {e.error_count()} error(s)")
            stats['skipped'] += 1
            continue

        if content_id:
            repository.import_content(str(content_id), item.to_document())
            stats['imported'] += 1
        else:
            repository.create_content(item.to_document())
            stats['created'] += 1

    return stats


def grant_admin(repository: UserRepository, uid: str) -> None:
    """Give a user the admin role, creating an empty profile if needed."""
    if repository.get_profile(uid) is None:
        repository.sync_profile(uid, display_name=None, email=None)
    repository.set_role(uid, 'admin')


def main(argv: Optional[List[str]] = None):
    """Main execution function."""
    parser = argparse.ArgumentParser(
        description='Populate the catalog with content items'
    )
    parser.add_argument(
        '--input',
        type=str,
        default='data/content.json',
        help='JSON file with content items (default: data/content.json)'
    )
    parser.add_argument(
        '--replace',
        action='store_true',
        help='Delete the existing catalog before loading'
    )
    parser.add_argument(
        '--admin-uid',
        type=str,
        default=None,
        help='User ID to grant the admin role'
    )

    args = parser.parse_args(argv)

    input_path = Path(args.input)
    if not input_path.is_absolute():
        input_path = project_root / input_path

    logger.info("="*70)
    logger.info("POPULATE CATALOG")
    logger.info("="*70)
    logger.info(f"Input file: {input_path}")
    logger.info(f"Replace existing: {args.replace}")
    logger.info("="*70)

    from cineverse_catalog_service.models.database import SessionLocal, engine

    try:
        Base.metadata.create_all(engine)

        documents = load_items(input_path)

        db = SessionLocal()
        try:
            stats = populate_catalog(ContentRepository(db), documents, replace=args.replace)

            if args.admin_uid:
                grant_admin(UserRepository(db), args.admin_uid)
                logger.info(f"✓ Granted admin role to {args.admin_uid}")

            total = ContentRepository(db).count_content()
        finally:
            db.close()

        logger.info("\n" + "="*70)
        logger.info("✓ CATALOG POPULATION COMPLETE")
        logger.info("="*70)
        logger.info(f"Imported with ID: {stats['imported']}")
        logger.info(f"Created: {stats['created']}")
        logger.info(f"Skipped: {stats['skipped']}")
        logger.info(f"Catalog size: {total}")

    except Exception as e:
        logger.error(f"Error during catalog population: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
