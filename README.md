# tp0net

A small TCP client and server pair that exchange two kinds of
operation over a simple binary protocol:

- **message**: a single string, sent on its own;
- **package**: a list of strings, sent together.

Every frame on the wire is a 32-bit little-endian operation code
(`OpCode.MESSAGE` is 0, `OpCode.PACKAGE` is 1), a 32-bit little-endian
payload size, and then the payload. A package payload is a run of
items, each a 32-bit little-endian length followed by that many bytes.
Strings are sent UTF-8 encoded with a trailing NUL byte; raw `bytes`
are sent as given.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
tp0net-server [--port PORT] [--log FILE]
```

The server listens on TCP port 4444 (or `--port`) on all interfaces,
waits for one client, and logs each operation it receives to the
console and to `log.log` (or `--log`):

- a message is logged as the text that arrived;
- a package is logged item by item;
- an unknown operation code is logged as a warning.

When the client disconnects the server logs an error and exits with
status 1.

## Running the client

The client reads its settings from `cliente.config` (or `--config`), a
plain `KEY=value` file; blank lines and lines starting with `#` are
ignored:

```
IP=127.0.0.1
PUERTO=4444
CLAVE=some value to send
```

Start the server first, then:

```
tp0net-client [--config FILE] [--log FILE]
```

The client logs to the console and to `tp0.log` (or `--log`). It then:

1. logs the values of `IP`, `PUERTO` and `CLAVE`;
2. reads lines from the console and logs each one, until you type
   `exit` or send end of input (Ctrl+D);
3. connects to the server and sends `CLAVE` as a message;
4. reads more lines from the console, until `exit` or end of input,
   and sends them all to the server as one package.

If the configuration file cannot be read, the client prints an error
and exits with status 1.

## Using the library

The wire format lives in `tp0net.protocol`:

```python
from tp0net.protocol import OpCode, Package, encode_message, decode_items

package = Package()
package.add("first")
package.add(b"raw bytes")
frame = package.serialize()          # bytes ready to send

frame = encode_message("hello")      # a single message frame
```

`decode_items(payload)` splits a package payload back into its list of
raw items, and raises `ValueError` if the payload is truncated or holds
a negative length.

The client side (`tp0net.client`) offers `create_logger`, `load_config`,
`read_lines`, `read_console`, `create_connection`, `send_message`,
`send_package` and `build_package`. The console readers take an
optional `input_func` in place of `input`.

The server side (`tp0net.server`) offers `start_server`, `wait_client`,
`receive_operation`, `receive_buffer`, `receive_message`,
`receive_package` and `serve_client`. `receive_operation` returns
`None` (and closes the socket) when the peer has disconnected, and
returns the plain integer for an unknown code; `receive_buffer` raises
`ConnectionError` if the connection closes mid-frame.

## What it does not do

The server handles a single client and stops when that client
disconnects; it does not accept further connections. After an unknown
operation code it does not skip any payload that may follow. The
client does not keep a command history for the lines typed at the
console.