#!/usr/bin/env python3
from rich.console import Console

# Initialize a single console object to be used by all modules
console = Console()

# Record types that can be checked for propagation
RECORD_TYPES = ["A", "AAAA", "TXT", "CNAME", "MX"]

# Public Resolvers
PUBLIC_RESOLVERS = [
    "1.1.1.1:53",  # Cloudflare
    "8.8.8.8:53",  # Google
    "9.9.9.9:53",  # Quad9
    "208.67.222.222:53",  # OpenDNS
    "86.54.11.100:53",  # DNS4EU
    "76.76.2.0:53",  # ControlD
]

# Root servers used to start the referral walk
ROOT_SERVERS = [
    "198.41.0.4:53",  # a.root-servers.net
    "199.9.14.201:53",  # b.root-servers.net
    "192.33.4.12:53",  # c.root-servers.net
    "199.7.91.13:53",  # d.root-servers.net
]

DEFAULT_SETTINGS = {
    "public_resolvers": PUBLIC_RESOLVERS,
    "root_servers": ROOT_SERVERS,
    "defaults": {
        "timeout": "1m",
        "retry": "5s",
        "record_type": "a",
    },
}

DNS_PORT = 53
QUERY_TIMEOUT = 5.0
MAX_REFERRAL_DEPTH = 10
EVENT_QUEUE_SIZE = 100

# Name used for the synthetic target that goes through the system resolver
LOCAL_RESOLVER_NAME = "local"
