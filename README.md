# dosevasive

`dosevasive` is WSGI middleware that watches how often each client address
requests pages and refuses clients that request too much, too fast. It keeps
a per-address tally of hits on each page and on the site as a whole. When a
client goes over a limit within an interval, the address is put on hold and
answered with `403 Forbidden` for a blocking period. Every request made while
on hold restarts the hold.

When an address is blacklisted, a record file is written to a log directory,
the event is logged, and optionally an e-mail notice is sent with `/bin/mail`
and a shell command is run with the address substituted in.

## Installing

```
pip install dosevasive
```

## Using it with a WSGI application

```python
from dosevasive.config import EvasiveConfig
from dosevasive.middleware import EvasiveMiddleware

config = EvasiveConfig.from_directives("""
DOSHashTableSize    3097
DOSPageCount        2
DOSSiteCount        50
DOSPageInterval     1
DOSSiteInterval     1
DOSBlockingPeriod   10
DOSLogDir           /var/log/dosevasive
DOSEmailNotify      admin@example.com
DOSWhitelist        127.0.0.1 10.0.*.*
""")

application = EvasiveMiddleware(my_wsgi_app, config)
```

`EvasiveMiddleware(app, config=None, clock=None)` takes the client address
from `REMOTE_ADDR`; requests without one are passed to the application
uncounted. The page counted is `SCRIPT_NAME` followed by `PATH_INFO` (or `/`),
without the query string. Refused requests get a plain-text `403 Forbidden`
response and an error is logged ("client denied by server configuration").
Whitelisted addresses always pass. `clock` is a function returning the current
time in seconds; by default the wall clock in whole seconds is used.

## Configuration

`EvasiveConfig` is a dataclass holding the settings. It can be built in three
ways:

- `EvasiveConfig.from_directives(text)` reads directive lines such as
  `DOSPageCount 5`. Blank lines, `#` comments and section tags like
  `<IfModule ...>` are skipped; arguments are split shell-style.
- `EvasiveConfig.from_mapping(mapping)` takes a mapping of directive names to
  string values. Numeric values are used when they read as a non-zero integer,
  text values whenever present, and `DOSWhitelist` is a comma-separated list.
- `config.apply(directive, *args)` applies a single directive.

Directive names are case-insensitive in `apply` and `from_directives`. An
unknown directive, or a wrong number of arguments, raises
`dosevasive.config.ConfigError` (a `ValueError`); `from_directives` adds the
line number to the message.

| Directive           | Attribute         | Default | Meaning                                                      |
|---------------------|-------------------|---------|--------------------------------------------------------------|
| `DOSHashTableSize`  | `hash_table_size` | 3097    | Size hint for the hit table (rounded up to a prime)          |
| `DOSPageCount`      | `page_count`      | 2       | Hits on one page allowed per page interval                   |
| `DOSSiteCount`      | `site_count`      | 50      | Hits on the whole site allowed per site interval             |
| `DOSPageInterval`   | `page_interval`   | 1       | Page interval, in seconds                                    |
| `DOSSiteInterval`   | `site_interval`   | 1       | Site interval, in seconds                                    |
| `DOSBlockingPeriod` | `blocking_period` | 10      | Seconds an address stays blocked after its last request      |
| `DOSLogDir`         | `log_dir`         | `/tmp`  | Where blacklist record files are written                     |
| `DOSEmailNotify`    | `email_notify`    | unset   | Address to mail when an address is blacklisted               |
| `DOSSystemCommand`  | `system_command`  | unset   | Shell command run on blacklisting; the first `%s` becomes the address, `%%` becomes `%` |
| `DOSLogUnblock`     | `log_unblock`     | On      | Log when a held address is released (`On` or `1` enable it)  |
| `DOSWhitelist`      | `whitelist`       | empty   | Addresses or wildcards (`10.*.*.*`, `10.0.*.*`, `10.0.0.*`) never blocked |

With directives, numeric values are read like C's `strtol` with base 0
(`0x1f` is hexadecimal, a leading `0` is octal, trailing text is ignored; see
`dosevasive.config.parse_long`); values that come out zero or negative fall
back to the default. Empty text values are ignored. `DOSWhitelist` takes one
or more entries and may be repeated.

## Using the detector directly

The detection logic is available without WSGI:

```python
from dosevasive.config import EvasiveConfig
from dosevasive.evasive import Evasive

with Evasive(EvasiveConfig()) as detector:
    allowed = detector.check("192.0.2.7", "/index.html")
    held = detector.is_blocked("192.0.2.7")
```

- `Evasive(config=None, clock=None, notifier=None)`: `check(ip, uri)` counts
  one request and returns `True` if it is allowed; `is_blocked(ip)` tells
  whether an address is currently on hold; `close()` forgets all counters.
- `Notifier(config, pid=None, logger=None)` handles blacklisting:
  `log_path(ip, now)` gives the record file `<log_dir>/dos-<ip>-<YYYYmmddHHMMSS>`
  in local time, and `blacklisted(ip, now)` writes the process id into it,
  logs a critical message, mails and runs the command. It does nothing and
  returns `False` if the file already exists or cannot be written.
  Any object with a `blacklisted(ip, now)` method can be passed as `notifier`.
- `dosevasive.whitelist.Whitelist` holds exact addresses and IPv4 wildcard
  patterns; `ip in whitelist` checks an address.
- `dosevasive.ntt.NamedTimestampTree` is the chained hash table of
  timestamped hit counters (`Node` entries) used for the tallies.

Messages go to the standard `logging` logger named `dosevasive`.

## What it does not do

Counters live in memory in one process. Several worker processes each keep
their own tallies and holds, and nothing is kept across restarts. The package
has no command-line program and no server of its own; it runs inside whatever
WSGI server hosts the application.

## Running the tests

```
pip install dosevasive[test]
pytest
```