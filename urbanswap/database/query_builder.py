import json

ALLOWED_TABLES = ("users", "listings", "swaps")


class QueryBuilder:
    @staticmethod
    def build_insert_query(data: dict, table_name: str, returning: str | None = None) -> tuple[str, list]:
        """
        Build INSERT query and values from dict.
        Does NOT execute - returns query and values for the caller to execute.

        Args:
            data: Dictionary of column names and values
            table_name: Name of the table to insert into
            returning: Optional RETURNING column list, e.g. "*"

        Returns:
            Tuple of (query_string, values_list)

        Example:
            query, values = QueryBuilder.build_insert_query({"title": "Bike"}, "listings")
            await conn.execute(query, *values)
        """
        if table_name not in ALLOWED_TABLES:
            raise ValueError(f"Invalid table: {table_name}")
        if not data:
            raise ValueError("Nothing to insert")

        values = [json.dumps(v) if isinstance(v, (dict, list)) else v for v in data.values()]
        columns = ", ".join(data.keys())
        placeholders = ", ".join(f"${i + 1}" for i in range(len(values)))

        query = f"INSERT INTO {table_name} ({columns}) VALUES ({placeholders})"
        if returning:
            query += f" RETURNING {returning}"
        return query, values

    @staticmethod
    def build_update_query(
        data: dict,
        table_name: str,
        where: dict,
        returning: str | None = None,
    ) -> tuple[str, list]:
        """
        Build UPDATE query and values from dict.
        Does NOT execute - returns query and values for the caller to execute.

        All ``where`` conditions are ANDed together, which is how ownership
        checks ride along with the update itself.

        Example:
            query, values = QueryBuilder.build_update_query(
                {"title": "Bike"}, "listings", {"id": listing_id, "user_id": caller_id}, returning="*"
            )
            row = await conn.fetchrow(query, *values)
        """
        if table_name not in ALLOWED_TABLES:
            raise ValueError(f"Invalid table: {table_name}")
        if not where:
            raise ValueError("UPDATE without a WHERE clause is not allowed")

        set_clauses = []
        values = []
        for key, value in data.items():
            if isinstance(value, (list, dict)):
                value = json.dumps(value)
            values.append(value)
            set_clauses.append(f"{key} = ${len(values)}")
        set_clauses.append("updated_at = NOW()")

        conditions = []
        for key, value in where.items():
            values.append(value)
            conditions.append(f"{key} = ${len(values)}")

        query = f"UPDATE {table_name} SET {', '.join(set_clauses)} WHERE {' AND '.join(conditions)}"
        if returning:
            query += f" RETURNING {returning}"
        return query, values
