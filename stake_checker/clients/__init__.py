from stake_checker.clients.source import RecordSource
from stake_checker.clients.subquery import SubQueryClient
from stake_checker.clients.rpc import NodeRPCClient

__all__ = ['RecordSource', 'SubQueryClient', 'NodeRPCClient']
