# pixshelf

pixshelf keeps a shelf of images behind a JSON API. You upload a picture
with a name and an optional description; it writes the file to disk,
records it in an SQLite database and hands back two links: one under
`/static/images/` and a shareable one under `/public-images/`. Images can
be listed page by page, searched by name or description, renamed,
re-described and deleted.

## Installing

```
pip install pixshelf
```

For running the test suite:

```
pip install "pixshelf[test]"
pytest
```

## Running the server

The package installs a `pixshelf` command that starts the web server:

```
pixshelf --help
```

| Option            | Default          | Meaning                                                   |
|-------------------|------------------|-----------------------------------------------------------|
| `--host`          | `0.0.0.0`        | address to listen on                                      |
| `--port`          | `8080`           | port to listen on                                         |
| `--database-url`  | `pixshelf.db`    | SQLite file path, or a `sqlite:///` URL                   |
| `--base-url`      | `http://localhost:PORT` | prefix used when building image links             |
| `--image-storage` | `static/images`  | directory that uploaded files are written to              |
| `--environment`   | `development`    | `development` runs the server in debug mode               |

The images table is created on start if it does not exist. If the database
cannot be opened (for instance a URL with a scheme other than `sqlite`),
the command prints `Failed to connect to database: ...` and exits with
status 1.

Files under `./static` (relative to the directory the server is started
from) are served at `/static/...`. With the default image storage the
`/static/images/` links therefore resolve; the `/public-images/` links
always do, as they are served straight from the image storage directory.

## The HTTP API

All JSON endpoints live under `/api`:

| Method | Path                  | What it does                                        |
|--------|-----------------------|-----------------------------------------------------|
| GET    | `/api/images`         | List images, newest first                           |
| GET    | `/api/images/search`  | Search by name or description (`q` is required)     |
| GET    | `/api/images/<id>`    | Fetch one image                                     |
| POST   | `/api/images`         | Upload (form fields `name`, `description`, `image`) |
| PUT    | `/api/images/<id>`    | Change `name` and `description`                     |
| DELETE | `/api/images/<id>`    | Remove the image and its file                       |

Stored files are served at `/public-images/<file name>`.

Listing and search take `page` (default 1) and `page_size` (default 20,
at most 100); values that are missing, not integers or out of range fall
back to those defaults. Responses carry an `images` list and a
`pagination` object with `page`, `page_size` and `total`. Each image has
`id`, `name`, `description`, `url`, `public_url`, `mime_type`,
`size_bytes`, `created_at` and `updated_at`.

Search matches anywhere in the name or description, ignoring the case of
ASCII letters.

A successful upload redirects to `/` with `303 See Other`; a delete answers
`204 No Content` with an `HX-Redirect: /` header. Uploads larger than
10 MB are refused and reported as an internal server error.

Errors come back as JSON of the form:

```json
{"error": "not_found", "message": "Image with ID 7 not found", "code": 404}
```

with `bad_request` (400) for a missing name, file or search query or a
non-numeric ID, `not_found` (404) for an unknown image, or
`internal_server_error` (500) for anything else.

Every response allows cross-origin use, and `OPTIONS` requests are answered
with `204` straight away.

## Using it from Python

The pieces can be put together by hand, for instance in tests or to embed
the API in another application:

```python
from pixshelf.queries import connect, ensure_schema, Queries
from pixshelf.repository import ImageRepository
from pixshelf.service import ImageService
from pixshelf.api import create_app

db = connect("pixshelf.db")
ensure_schema(db)
service = ImageService(
    ImageRepository(Queries(db)),
    base_url="http://localhost:8080",
    upload_path="./static/images",
    max_file_size=10 * 1024 * 1024,
)
app = create_app(service)
```

`pixshelf.api.register_routes(app, service)` attaches the same API routes
to an existing Flask application. `ImageService.create` takes a
`pixshelf.service.UploadedFile` and raises `FileTooLargeError` when it is
over `max_file_size`; repository failures raise
`pixshelf.repository.RepositoryError`.

Uploaded file names are made safe with `pixshelf.service.sanitize_filename`
and prefixed with a nanosecond timestamp, so two uploads of
`holiday photo.jpg` never collide.

## What it does not do

pixshelf has no HTML front end: there is no gallery page, upload form or
edit page, and `/` itself is not served, even though uploads redirect
there. The `ImageData` and `PageView` classes in `pixshelf.models` hold
the data such pages would show, but nothing renders them. Storage is
SQLite only.