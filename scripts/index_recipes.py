#!/usr/bin/env python
"""Embed recipes from a JSON file and store them in Qdrant.

Usage:
    python -m scripts.index_recipes --input data/recipes.json

The input is a JSON array of recipe objects. Existing points with the same
recipe id are overwritten, so the script can be re-run after edits.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from recipe_agent.config import get_settings
from recipe_agent.embeddings.service import HTTPEmbeddingService
from recipe_agent.exceptions import RecipeAgentError
from recipe_agent.logging_config import get_logger, setup_logging
from recipe_agent.recipes.indexing import RecipeIndexer
from recipe_agent.recipes.models import Recipe
from recipe_agent.recipes.repository import QdrantRecipeRepository

logger = get_logger(__name__)

_RECIPES = TypeAdapter(list[Recipe])


def load_recipes(path: Path) -> list[Recipe]:
    """Parse a JSON array of recipes."""
    return _RECIPES.validate_json(path.read_bytes())


async def run_indexing(input_path: Path, limit: int | None = None) -> int:
    """Index recipes and return how many were written.

    Args:
        input_path: Path to the recipes JSON file.
        limit: Optional cap on the number of recipes indexed.
    """
    settings = get_settings()
    setup_logging(level="INFO")

    recipes = load_recipes(input_path)
    if limit is not None:
        recipes = recipes[:limit]
    logger.info(f"Loaded {len(recipes)} recipes from {input_path}")

    embedding_service = HTTPEmbeddingService(settings.embedding)
    repository = QdrantRecipeRepository(settings.qdrant)
    try:
        if recipes:
            probe = await embedding_service.embed("recipe")
            await repository.ensure_collection(probe.dimensions)

        indexer = RecipeIndexer(embedding_service, repository)
        written = 0
        batch_size = settings.embedding.batch_size
        for start in range(0, len(recipes), batch_size):
            written += await indexer.index(recipes[start : start + batch_size])
            logger.info(f"Indexed {written}/{len(recipes)} recipes")
    finally:
        await embedding_service.close()
        await repository.close()

    return written


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Embed recipes and store them in Qdrant",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Path to recipes JSON file",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Limit number of recipes to index",
    )

    args = parser.parse_args()

    try:
        written = asyncio.run(run_indexing(args.input, limit=args.limit))
    except PydanticValidationError as e:
        logger.error(f"Invalid recipes file {args.input}: {e}")
        sys.exit(2)
    except RecipeAgentError as e:
        logger.error(f"Indexing failed: {e.message}", extra={"code": e.code.value})
        sys.exit(1)

    print(f"Indexed {written} recipes into '{get_settings().qdrant.collection_name}'")


if __name__ == "__main__":
    main()
