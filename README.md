# servicekit

Building blocks for a layered web service: entities, repositories, use cases,
bearer-token checks, PDF invoices and a Flask application that ties them
together. Python 3.10 or later.

Install with the test extra to run the suite:

```
pip install .[test]
pytest
```

## What is in the package

| Module | Contents |
| --- | --- |
| `servicekit.entity` | `User`, `UserHistory`, `Translation`, `TranslationHistory`, `RedisValue`, `ShipperLocation`, `VietQR`, `VietQRStatus`, `VietQRGenerateRequest`, and the event records `UserEvent` and `TranslationEvent`. Most have `to_dict()`; the events and `ShipperLocation` also have `from_dict()`. `User.to_dict()` never includes the password. |
| `servicekit.models` | Row models `UserModel`, `TranslationModel`, `ShipperLocationModel` and the converters `to_shipper_location_entity` / `to_shipper_location_model`. |
| `servicekit.logger` | `Logger(level, stream)`, writing one JSON line per message; `parse_level(name)`. `fatal()` raises `SystemExit(1)`. |
| `servicekit.contracts` | Protocols the use cases depend on: `TranslationRepo`, `TranslationWebAPI`, `RedisRepo`, `KafkaRepo`, `NatsRepo`, `QRGenerator`, `VietQRStore`. |
| `servicekit.postgres` | `Postgres(url, max_pool_size, conn_attempts, conn_timeout)`: a SQLAlchemy engine whose first connection is retried. Any SQLAlchemy URL works, including `sqlite://`. |
| `servicekit.sql_repos` | `TranslationRepository`, `UserRepository`, `ShipperLocationRepository`, `VietQRRepository`, `create_schema(engine)`, and the errors `RepositoryError`, `RecordNotFoundError`, `UserNotFoundError`. |
| `servicekit.redis_store` | `connect_redis(url, timeout)`, `RedisRepository` for plain values and cached shipper locations, `shipper_location_key()`, `KeyNotFoundError`. |
| `servicekit.kafka` | `Producer`, `Consumer`, `Manager`, `Message`, `KafkaError`, and `MemoryBroker`, an in-process broker with one partition per topic and offsets per consumer group. |
| `servicekit.kafka_usecase` | `KafkaUseCase` (send a message, wait for one) and `KafkaEventUseCase` (user and translation events on the `user-events` and `translation-events` topics). |
| `servicekit.usecases` | `TranslationUseCase`, `RedisUseCase`, `ShipperLocationUseCase` (cache first, then stored history), `VietQRUseCase`, `NatsUseCase`, `UseCaseError`. |
| `servicekit.pdf` | `PdfCanvas`, a dependency-free single-page PDF writer using the standard base fonts. |
| `servicekit.billing` | `InvoiceData`, `InvoiceItem`, `render_invoice()`, the `draw_*` layout functions and `BillingUseCase.generate_invoice_pdf(data, output_path)`. |
| `servicekit.invoice_demo` | `sample_invoice()`, `render_demo_invoice()` and the `servicekit-invoice-demo` command. |
| `servicekit.auth` | `authenticate(header, secret)`, the `require_auth(secret, logger)` view decorator, `AuthError`. |
| `servicekit.schemas` | Request parsers with `from_json()` and `ValidationError`; `error_body()` and `success_body()`. |
| `servicekit.http_api` | `create_app(translation, redis, vietqr, billing, logger, shipper_location, output_dir)`. |
| `servicekit.server` | `HttpServer`, running a Flask app in a background thread with `start()`, `wait(timeout)` and `shutdown()`. |

## Writing an invoice

```python
from servicekit.billing import BillingUseCase
from servicekit.invoice_demo import sample_invoice

BillingUseCase().generate_invoice_pdf(sample_invoice(), "invoice.pdf")
```

From the command line, a sample invoice with a gridded item table is written to
`hello.pdf`, or to the path given:

```
servicekit-invoice-demo invoice.pdf
```

## Storing users

```python
from servicekit.models import UserModel
from servicekit.postgres import Postgres
from servicekit.sql_repos import UserRepository, create_schema

pg = Postgres("sqlite://")
create_schema(pg.engine)
users = UserRepository(pg)

password = "password"
user = users.create(UserModel(email="ada@example.com", username="ada", password=password))
print(users.get_by_id(user.id).email)
```

`get_by_id` and the other lookups raise `RecordNotFoundError` when no row
matches; `get_by_email` raises `UserNotFoundError`.

## Messages

```python
from servicekit.kafka import Manager, MemoryBroker
from servicekit.kafka_usecase import KafkaUseCase

manager = Manager(MemoryBroker())
kafka = KafkaUseCase(manager)
kafka.produce_message("orders", "order-1", {"total": 10})
key, value = kafka.consume_message("orders", "billing", timeout=2.0)
# key == "order-1", value == b'{"total":10}'
```

Values are sent as compact JSON. `consume_message` registers a consumer for
the topic that stays registered, so a second call for the same topic raises
`KafkaError`; it raises `TimeoutError` when nothing arrives in time.

## Checking a bearer token

`authenticate(header, secret)` verifies an HMAC-signed JWT taken from an
`Authorization` header and returns the numeric `sub` claim. It raises
`AuthError` when the header is missing, is not `Bearer <token>`, or the token
is invalid or has no numeric subject.

```python
from servicekit.auth import AuthError, authenticate

secret = "secret"
try:
    authenticate("Bearer token", secret)
except AuthError as exc:
    print(exc)  # invalid token
```

`require_auth(secret, logger)` wraps the same check around a Flask view,
stores the user id in `flask.g.user_id`, and answers 401 with a JSON error
otherwise.

## The HTTP application

`create_app(...)` returns a Flask application. `GET /healthz` is always
served; every other group appears only when its use case is passed in:

- `translation`: `GET /v1/translation/history`, `POST /v1/translation/do-translate`
- `redis`: `POST /v1/redis/set`, `GET /v1/redis/get/<key>`
- `shipper_location`: `POST /v1/redis/shipper/location`, `GET /v1/redis/shipper/location/<shipper_id>`
- `vietqr`: `POST /v1/vietqr/gen`, `GET /v1/vietqr/inquiry/<id>`, `PUT /v1/vietqr/update/<id>`
  (the status may be set to `in-process`, `paid`, `fail` or `timeout`)
- `billing`: `POST /v1/billing/invoice`, which writes `invoice_<number>.pdf` into `output_dir`
  and answers with its `file_path`

Bad bodies answer 400 and failing use cases 500, always as
`{"error": "..."}`. To serve it:

```python
from servicekit.http_api import create_app
from servicekit.server import HttpServer

server = HttpServer(create_app(), host="127.0.0.1", port=8080)
server.start()
# ...
server.shutdown()
```

## What the package does not do

- There is no command that starts the whole service; wiring the database,
  Redis, use cases and `HttpServer` together is left to your code.
- The HTTP application has no user, login, Kafka or NATS routes, and
  `require_auth` is not applied to any route of `create_app`.
- There is no user use case: users are reachable only through `UserRepository`,
  and no password hashing or token issuing is provided.
- No network clients are included for Kafka or NATS, nor for a translation
  service or a VietQR payload generator. `Producer`, `Consumer` and `Manager`
  work over any object with the broker interface, and `MemoryBroker` is the only
  one supplied; the other services must be supplied as objects matching the
  protocols in `servicekit.contracts`.
- Database migrations are not provided; `create_schema` only creates missing tables.