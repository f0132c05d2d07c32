import sys

from rememberme.db.schema import render_schema

# uso: python tools/print_schema.py [sqlite|mysql|postgresql]
dialect = sys.argv[1] if len(sys.argv) > 1 else "sqlite"
print(render_schema(dialect))
