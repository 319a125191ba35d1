"""
Interactive REPL for the database.
"""

from typing import Optional

from .config import get_settings
from .engine import DatabaseEngine
from .executor import ExecutionResult
from .logging import setup_logging


class DatabaseREPL:
    """Command-line REPL for interacting with the database."""

    prompt = "relstore> "
    continuation_prompt = "      ... "

    def __init__(self, engine: Optional[DatabaseEngine] = None):
        self.engine = engine or DatabaseEngine()
        self.running = False

    def run(self):
        """Run the REPL."""
        self.running = True
        print("relstore REPL")
        print("Type 'exit' or 'quit' to exit")
        print("Type 'help' for help\n")

        while self.running:
            try:
                line = input(self.prompt).strip()

                if not line:
                    continue
                if line.lower() in ('exit', 'quit'):
                    break
                elif line.lower() == 'help':
                    self._print_help()
                    continue
                elif line.lower() in ('tables', '.tables'):
                    self._list_tables()
                    continue

                # Statements may span several lines up to a closing ';'
                query = line
                if line.lower().startswith(('create', 'insert', 'select')):
                    while not query.endswith(';'):
                        next_line = input(self.continuation_prompt).strip()
                        if not next_line:
                            break
                        query += " " + next_line

                result = self.engine.execute(query)
                self._display_result(result)

            except (SyntaxError, ValueError) as e:
                print(f"Error: {e}")
            except KeyboardInterrupt:
                print("\nInterrupted")
                break
            except EOFError:
                print()
                break

        self.running = False

    def _print_help(self):
        """Print help information."""
        help_text = """
Available commands:
  exit, quit           - Exit the REPL
  help                 - Show this help
  tables, .tables      - List all tables

SQL-like statements (end with ';' or an empty line):
  CREATE TABLE         - Create a new table
  INSERT INTO          - Insert a row into a table
  SELECT               - Query data, optionally joining a second table

Examples:
  CREATE TABLE users (id INT PRIMARY, name TEXT, email TEXT UNIQUE);
  INSERT INTO users VALUES (1, 'Alice', 'alice@example.com');
  SELECT * FROM users;
  SELECT name, email FROM users;
  SELECT * FROM users JOIN orders ON id = user_id;
        """
        print(help_text)

    def _list_tables(self):
        """List all tables."""
        tables = self.engine.list_tables()
        if not tables:
            print("No tables in database.")
            return

        print("Tables:")
        for table in tables:
            info = self.engine.get_table_info(table)
            print(f"  {table} ({info['row_count']} rows)")
            for col in info['schema']:
                constraints = []
                if col['is_primary']:
                    constraints.append("PRIMARY")
                if col['is_unique']:
                    constraints.append("UNIQUE")
                constraint_str = f" ({', '.join(constraints)})" if constraints else ""
                print(f"    {col['name']} {col['type']}{constraint_str}")

    def _display_result(self, result: ExecutionResult):
        """Display a query result in a readable format."""
        print(format_result(result))


def format_result(result: ExecutionResult) -> str:
    """Render a result as a message or a padded text table."""
    if not result.is_tabular:
        return result.message

    headers = result.headers
    cells = [[str(value) for value in row] for row in result.rows]

    widths = [len(h) for h in headers]
    for row in cells:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    header = " | ".join(f"{h:<{widths[i]}}" for i, h in enumerate(headers))
    lines = [header, "-" * len(header)]
    for row in cells:
        lines.append(" | ".join(f"{cell:<{widths[i]}}" for i, cell in enumerate(row)))

    lines.append("")
    lines.append(f"{result.row_count} row(s) returned")
    return "\n".join(lines)


def main():
    """Main entry point for the REPL."""
    import argparse

    settings = get_settings()

    parser = argparse.ArgumentParser(description="relstore REPL")
    parser.add_argument("--data-file", default=str(settings.data_file),
                        help="Database snapshot file")
    parser.add_argument("--no-persist", action="store_true",
                        help="Keep the database in memory only")
    parser.add_argument("--strict-join", action="store_true",
                        help="Require JOIN / ON / = keywords in join clauses")
    parser.add_argument("--log-level", default=settings.log_level,
                        help="Log level")

    args = parser.parse_args()

    setup_logging(args.log_level, settings.log_format)
    settings = settings.model_copy(update={
        'strict_join': settings.strict_join or args.strict_join,
    })
    engine = DatabaseEngine(args.data_file, settings=settings,
                            persist=settings.persist and not args.no_persist)

    repl = DatabaseREPL(engine)
    repl.run()


if __name__ == "__main__":
    main()
