"""
EC2 instance listing and health checks
"""

from .base import BaseAnalyzer

LIST_COLUMNS = [
    "InstanceId",
    "Name",
    "InstanceType",
    "State",
    "AvailabilityZone",
    "PrivateIp",
    "PublicIp",
    "LaunchTime",
]

HEALTH_COLUMNS = ["InstanceId", "Name", "State", "Health", "Issues"]

# Health levels, worst last
HEALTH_LEVELS = ["OK", "WARN", "CRIT"]

CRITICAL_STATES = {"stopped", "stopping", "terminated", "shutting-down"}
WARNING_STATES = {"pending"}
DISABLED_MONITORING = {"disabled", "disabling"}


class InstanceLister(BaseAnalyzer):
    """Lists instances from a describe-instances response"""

    title = "EC2 INSTANCES"

    def analyze(self, document):
        instances = self.data_processor.instances_frame(document)
        return instances[LIST_COLUMNS].reset_index(drop=True)


class InstanceHealthChecker(BaseAnalyzer):
    """Flags instances that are down, unnamed, unmonitored or publicly exposed"""

    title = "EC2 HEALTH"

    def analyze(self, document):
        instances = self.data_processor.instances_frame(document)
        checked = instances[["InstanceId", "Name", "State"]].copy()
        findings = [
            self.check_instance(row) for row in instances.itertuples(index=False)
        ]
        checked["Health"] = [health for health, _ in findings]
        checked["Issues"] = ["; ".join(issues) for _, issues in findings]
        return checked[HEALTH_COLUMNS].reset_index(drop=True)

    def check_instance(self, instance):
        """
        Evaluate one instance row

        Returns:
            tuple: (health level, list of issue tags)
        """
        issues = []
        level = "OK"

        def flag(issue, severity):
            nonlocal level
            issues.append(issue)
            if HEALTH_LEVELS.index(severity) > HEALTH_LEVELS.index(level):
                level = severity

        if instance.State in CRITICAL_STATES:
            flag(f"state:{instance.State}", "CRIT")
        elif instance.State in WARNING_STATES:
            flag(f"state:{instance.State}", "WARN")

        if not instance.Name:
            flag("no-name-tag", "WARN")
        if instance.Monitoring in DISABLED_MONITORING:
            flag("monitoring-disabled", "WARN")
        if instance.PublicIp and instance.State == "running":
            flag("public-ip", "WARN")

        return level, issues

    def summary(self, health):
        """One-line count of instances per health level"""
        counts = health["Health"].value_counts()
        parts = [f"{level}: {int(counts.get(level, 0))}" for level in HEALTH_LEVELS]
        return f"{len(health)} instance(s) checked ({', '.join(parts)})"
