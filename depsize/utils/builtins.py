"""Node.js built-in module names."""

NODE_BUILTIN_MODULES = frozenset(
    {
        "_http_agent",
        "_http_client",
        "_http_common",
        "_http_incoming",
        "_http_outgoing",
        "_http_server",
        "_stream_duplex",
        "_stream_passthrough",
        "_stream_readable",
        "_stream_transform",
        "_stream_wrap",
        "_stream_writable",
        "_tls_common",
        "_tls_wrap",
        "assert",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "diagnostics_channel",
        "dns",
        "domain",
        "events",
        "fs",
        "http",
        "http2",
        "https",
        "inspector",
        "module",
        "net",
        "os",
        "path",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "repl",
        "stream",
        "string_decoder",
        "sys",
        "timers",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "v8",
        "vm",
        "wasi",
        "worker_threads",
        "zlib",
    }
)

NODE_PREFIX = "node:"


def is_builtin_module(specifier: str) -> bool:
    """Return True when ``specifier`` names a Node.js built-in module.

    ``node:``-prefixed specifiers always count; otherwise the first path
    segment is checked so ``fs/promises`` is treated like ``fs``.
    """
    if specifier.startswith(NODE_PREFIX):
        return True
    return specifier.split("/", 1)[0] in NODE_BUILTIN_MODULES
