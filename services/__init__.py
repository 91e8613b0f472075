# Business logic services
from .cluster import ClusterFetcher
from .topology import TopologyView

__all__ = ['ClusterFetcher', 'TopologyView']
