"""
MySQL Text Search -- MATCH ... AGAINST in boolean mode.

Requires a FULLTEXT index covering the searched columns, e.g.:

    ALTER TABLE cookbook_recipe
        ADD FULLTEXT cookbook_recipe_fulltext (name, description, instructions);

Configuration:
    COOKBOOK = {
        "SEARCH_BACKEND": "cookbook.adapters.mysql.MySQLTextSearch",
    }
"""

from __future__ import annotations

from cookbook.adapters.base import RawTextSearch


class MySQLTextSearch(RawTextSearch):
    """
    Token matching through the FULLTEXT index.

    The search text is wrapped in '*' so partial words match. MATCH returns
    a relevance score; "> 0" turns it into a boolean the ORM can OR.
    """

    def sql(self, columns: list[str], text: str) -> tuple[str, list]:
        return (
            f"MATCH({', '.join(columns)}) AGAINST (%s IN BOOLEAN MODE) > 0",
            [f"*{text}*"],
        )
