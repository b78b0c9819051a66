"""
Database debug routes, available only in debug mode
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException

from quizroom.database import Database
from quizroom.dependencies import get_database, require_debug

router = APIRouter(prefix="/api/database", dependencies=[Depends(require_debug)])


@router.post("/reset")
async def reset_database(
    db: Annotated[Database, Depends(get_database)],
) -> dict[str, str]:
    """Drop and recreate every table"""
    await db.reset_database()
    return {"status": "reset"}


@router.get("/{table_name}")
async def get_all_from_table(
    table_name: str,
    db: Annotated[Database, Depends(get_database)],
) -> list[dict[str, Any]]:
    """Dump every row of a table"""
    try:
        return await db.get_all_from_table(table_name)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
