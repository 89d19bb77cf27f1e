"""Methods to find the domain of integration (the true motion interval) within a padded bout."""

from meerkatmap.integration_domain._std_threshold_domain_detection import StdThresholdDomainDetection

__all__ = ["StdThresholdDomainDetection"]
