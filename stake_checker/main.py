#!/usr/bin/env python3
"""
Stake Checker

Checks a Polkadot account against a node and SubQuery indexers:
- Account balances and chain total issuance
- Staking rewards and stake changes not yet in the local CSV caches
- Raw state_getStorage lookups, decoded when the item is known
"""

import argparse
import json
import sys
from typing import List, Optional

import requests
from pydantic import ValidationError

from stake_checker.checker import StakeChecker
from stake_checker.config import StakeCheckerSettings, describe_settings_error
from stake_checker.exceptions import StakeCheckerError
from stake_checker.formatting import format_balance
from stake_checker.reconcile import BoundaryPolicy


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='stake-checker',
        description='Check Polkadot Staking Rewards',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Settings are read from the environment or a .env file:
  RPC_ENDPOINT, SUBQUERY_ENDPOINT_REWARDS, SUBQUERY_ENDPOINT_STAKE_CHANGES,
  POLKADOT_ADDR, KNOWN_REWARDS_FILE, KNOWN_STAKE_CHANGES_FILE,
  POLKADOT_PROPERTIES_FILE

Examples:
  # New rewards since the last line of the known rewards file
  stake-checker --staking_rewards

  # Same, and append them to the file
  stake-checker --staking_rewards --update-cache

  # Raw storage lookup, decoded because System.Account is known
  stake-checker --get_storage System Account 16ZL8yLyXv3V3L3z9ofR1ovFLziyXaN1DPq4yffMAZ9czzBD
        """
    )
    parser.add_argument('-r', '--rpc_methods', action='store_true',
                        help='Call endpoint func rpc_methods')
    parser.add_argument('-m', '--metadata', action='store_true',
                        help='Call endpoint func state_getMetadata')
    parser.add_argument('-p', '--properties', action='store_true',
                        help='Call endpoint func system_properties')
    parser.add_argument('-t', '--total_issuance', action='store_true',
                        help="Get endpoint chain's total issuance")
    parser.add_argument('-a', '--account_balances', action='store_true',
                        help="Get account's balances")
    parser.add_argument(
        '-g', '--get_storage',
        nargs='+',
        metavar='ARG',
        help='Raw state_getStorage rpc call. Provide at least two args: <module>, and <name>. '
             'Third is an optional address. The value is decoded before printing when the '
             'module+name combination is known, printed as raw bytes otherwise.'
    )
    parser.add_argument(
        '-s', '--staking_rewards', action='store_true',
        help="Get account's staking rewards. Will skip those already listed in the known "
             "rewards file. Will retrieve at most 100 new rewards."
    )
    parser.add_argument(
        '-c', '--stake_changes', action='store_true',
        help="Get account's stake changes. Will skip those already listed in the known "
             "stake changes file. Will retrieve at most 100 new stake changes."
    )
    parser.add_argument(
        '--include-boundary', action='store_true',
        help='Also report the first fetched record at or after the last known one '
             '(by default it is treated as already known)'
    )
    parser.add_argument('--update-cache', action='store_true',
                        help='Append new rewards/stake changes to their known files')
    return parser


def execute(checker: StakeChecker, args: argparse.Namespace):
    policy = BoundaryPolicy.INCLUDE_MATCH if args.include_boundary else BoundaryPolicy.SKIP_MATCH

    if args.staking_rewards:
        rewards = checker.get_staking_rewards(policy)
        for reward in rewards:
            print(reward)
        if args.update_cache:
            checker.append_to_cache(checker.config.known_rewards_file, rewards)

    if args.stake_changes:
        stake_changes = checker.get_stake_changes(policy)
        for stake_change in stake_changes:
            print(stake_change)
        if args.update_cache:
            checker.append_to_cache(checker.config.known_stake_changes_file, stake_changes)

    if args.rpc_methods:
        print(json.dumps(checker.rpc_client.rpc_methods(), indent=2))

    if args.metadata:
        print(json.dumps(checker.rpc_client.state_get_metadata(), indent=2, default=str))

    if args.properties:
        print(json.dumps(checker.rpc_client.system_properties(), indent=2))

    if args.total_issuance:
        total_issuance = checker.get_total_issuance()
        print(f"Total issued {format_balance(total_issuance, checker.token_decimals())} {checker.token_symbol()}")

    if args.account_balances:
        account_info = checker.get_account_info()
        print(account_info.data_description(checker.token_decimals(), checker.token_symbol()))

    if args.get_storage:
        module_name, field_name, *rest = args.get_storage
        address = rest[0] if rest else None
        value = checker.get_decoded_storage(module_name, field_name, address)
        print(value.describe(checker.token_decimals(), checker.token_symbol()))


def run(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        parser.print_help(sys.stderr)
        return 2

    args = parser.parse_args(argv)
    if args.get_storage is not None and not 2 <= len(args.get_storage) <= 3:
        parser.error('--get_storage takes 2 or 3 arguments: <module> <name> [address]')

    try:
        config = StakeCheckerSettings()
    except ValidationError as e:
        print(f"Error: {describe_settings_error(e)}", file=sys.stderr)
        return 1

    checker = StakeChecker(config)
    try:
        execute(checker, args)
    except (StakeCheckerError, requests.RequestException, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
