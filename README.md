# repoquery

Query code hosts, package registries and configuration files with plain SQL.

`repoquery` registers a set of SQL functions on a standard `sqlite3`
connection. It also provides Python iterators over GitHub, Sourcegraph and
npm data. Query results can be printed as a table, CSV, TSV, JSON lines or a
single value. They can also be copied into a PostgreSQL table.

## What is included

**Text helpers** (`repoquery.helpers`)

- `str_split(input, separator, index)` returns one piece of a split string.
  It returns `NULL` when the index is out of range.
- `toml_to_json(text)` converts a TOML document to JSON.
- `yaml_to_json(text)` converts a YAML document to JSON. It is also
  registered as `yml_to_json`.
- `xml_to_json(text)` converts an XML document to JSON.

**Go modules** (`repoquery.gomod`)

- `go_mod_to_json(data)` parses a `go.mod` file into JSON. The JSON holds the
  module path, the `go` version, and the `require`, `exclude`, `replace` and
  `retract` entries. Empty input gives `NULL`.

**GitHub** (`repoquery.github`)

- `stargazer_count` and `repo_file_content` fetch single values.
- `stargazers`, `starred_repos`, `user_repos`, `org_repos`, `repo_issues` and
  `repo_pull_requests` yield rows and page through the GraphQL API on demand.

**Sourcegraph** (`repoquery.sourcegraph`)

- `sourcegraph_search` runs a code search and yields its results.

**npm** (`repoquery.npm`)

- `npm_get_package` returns the registry document for a package. You can also
  ask for one version of it.

**Saved queries** (`repoquery.queries`)

- `find(name)` looks up one of the bundled queries, such as `commit-info`,
  `commits-per-author` or `author-stats`.

## Using the SQL functions

```python
import sqlite3

from repoquery import helpers, gomod

connection = sqlite3.connect(":memory:")
helpers.register(connection)
gomod.register(connection)

row = connection.execute("SELECT str_split('hello world', ' ', 0)").fetchone()
print(row[0])  # hello

row = connection.execute("""SELECT toml_to_json('[package]
name = "hog"')""").fetchone()
print(row[0])  # {"package":{"name":"hog"}}

row = connection.execute("""SELECT yml_to_json('doe: "a deer, a female deer"')""").fetchone()
print(row[0])  # {"doe":"a deer, a female deer"}
```

You can call the helpers directly from Python as well:

```python
from repoquery.helpers import xml_to_json

print(xml_to_json("<employee><fname>john</fname><lname>doe</lname></employee>"))
```

## Configuring everything at once

Options are built from small option functions. Each one switches on a feature
or sets a value that the extensions read:

```python
import sqlite3

from repoquery import extension
from repoquery.options import (
    build_options,
    with_context_value,
    with_extra_functions,
    with_github,
    with_npm,
)

opts = build_options(
    with_extra_functions(),
    with_github(),
    with_context_value("githubToken", "token"),
    with_npm(),
)

connection = sqlite3.connect(":memory:")
extension.register(connection, opts)
```

`extension.default_options(environ)` builds the full set of options from an
environment mapping such as `os.environ`. It reads these variables:

- `GITHUB_TOKEN`
- `GITHUB_PER_PAGE`: the page size, default 100.
- `GITHUB_RATE_LIMIT`: for example `5` for five requests a second, or `2/3`
  for two requests every three seconds.
- `SOURCEGRAPH_TOKEN`

## Displaying results

```python
import sqlite3
import sys

from repoquery.display import write_to

connection = sqlite3.connect(":memory:")
cursor = connection.execute("SELECT 1 AS id, 'name 1' AS name")
write_to(cursor, sys.stdout, "csv", False)
```

The supported formats are:

- `table` (the default for any other value)
- `csv`
- `tsv`
- `json` (one object per line)
- `single` (the first column of the first row)

## Copying results into PostgreSQL

`repoquery.pgsync.sync` runs a query against a source connection. It creates
a matching PostgreSQL table, copies the rows into it, then swaps it in place
of the target table. The swap drops the old table, so point it only at tables
that may be replaced.