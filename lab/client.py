# lab/client.py
"""
Oracle Lab Client — walks the lab flow against a running lab server

  1. Build a query id from a query type and typed arguments
  2. Encode a reported value
  3. (Optional) Submit the pair to the lab contract
  4. (Optional) Read back the data feed for the query id

Fields are given as type=value or type:scale=value, e.g.
  string=eth  uint256:18=2100  bool=true

Usage:
  python3 -m lab.client --query-type SpotPrice --arg string=eth --arg string=usd \\
      --value uint256:18=2100 --submit --feed
"""

import argparse
import sys

import httpx

from lab import config


def parse_field(text: str) -> dict:
    spec, sep, value = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected type=value, got {text!r}")
    type_, _, scale = spec.partition(":")
    field = {"type": type_, "value": value}
    if scale:
        field["scale"] = scale
    return field


def _show_error(resp: httpx.Response):
    try:
        data = resp.json()
    except ValueError:
        data = {"detail": resp.text}
    print(f"  ✗ {resp.status_code} {data.get('error', '')} {data.get('detail', '')}".rstrip())


def build_query_id(client: httpx.Client, query_type: str, args: list):
    print(f"=== Query ID: {query_type} ===")
    resp = client.post("/query/id", json={"query_type": query_type, "args": args})
    if resp.status_code != 200:
        _show_error(resp)
        return None
    data = resp.json()
    for a in data["args"]:
        print(f"  {a['type']:8s} {a['value']}")
    if not data["args"]:
        print("  (no arguments)")
    print(f"  Query Data: {data['query_data']}")
    print(f"  Query ID:   {data['query_id']}")
    return data


def encode_value(client: httpx.Client, values: list):
    print("\n=== Encode Value ===")
    resp = client.post("/value/encode", json={"values": values})
    if resp.status_code != 200:
        _show_error(resp)
        return None
    data = resp.json()
    for v in data["values"]:
        scale = f" (decimals: {v['scale']})" if v.get("scale") not in (None, "", "0", 0) else ""
        print(f"  {v['type']:8s} {v['value']}{scale}")
    print(f"  Encoded:    {data['encoded_value']}")
    return data


def submit(client: httpx.Client):
    print("\n=== Submit ===")
    resp = client.post("/submit", json={}, timeout=config.TX_TIMEOUT + 10)
    if resp.status_code != 200:
        _show_error(resp)
        return None
    data = resp.json()
    print(f"  Network: {data['network']}")
    print(f"  Tx:      {data['tx_hash']}")
    return data


def show_feed(client: httpx.Client, query_id: str):
    print(f"\n=== Data Feed: {query_id[:10]}... ===")
    resp = client.get(f"/feed/{query_id}")
    if resp.status_code != 200:
        _show_error(resp)
        return None
    data = resp.json()
    cur = data["current"]
    print(f"  Entries:  {data['count']}")
    print(f"  Current:  {cur['decoded'] if cur['decoded'] is not None else cur['error'] or 'none'}")
    print(f"  Refresh:  every {data['refresh_interval']:.0f}s")
    for row in data["history"]:
        shown = row["decoded"] if row["decoded"] is not None else ("undecodable" if row["error"] else "no decoder")
        print(f"    [{row['index']}] {shown:24s} ts={row['timestamp']}")
    return data


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Oracle Lab client")
    parser.add_argument("--url", default=config.SERVER_URL, help="Lab server URL")
    parser.add_argument("--query-type", default="SpotPrice")
    parser.add_argument("--arg", action="append", type=parse_field, default=None,
                        help="query argument type=value (repeat); default string=eth string=usd")
    parser.add_argument("--no-args", action="store_true", help="build a query with no arguments")
    parser.add_argument("--value", action="append", type=parse_field, default=None,
                        help="reported value type[:scale]=value (repeat); default uint256:18=2100")
    parser.add_argument("--submit", action="store_true", help="submit to the lab contract")
    parser.add_argument("--feed", action="store_true", help="read the data feed afterwards")
    args = parser.parse_args()

    query_args = [] if args.no_args else (args.arg or [parse_field("string=eth"), parse_field("string=usd")])
    values = args.value or [parse_field("uint256:18=2100")]

    print("Oracle Lab Client")
    print("=" * 50)
    with httpx.Client(base_url=args.url, timeout=30) as client:
        query = build_query_id(client, args.query_type, query_args)
        value = encode_value(client, values)
        if query is None or value is None:
            sys.exit(1)
        if args.submit:
            submit(client)
        if args.feed:
            show_feed(client, query["query_id"])
    print("\n" + "=" * 50)
    print("Done.")
