"""Default values for a JFTF development deployment."""

APT_PACKAGES = (
    "python3-venv",
    "python3-dev",
    "python3-pip",
    "mariadb-server",
    "libmariadb-dev-compat",
    "libmariadb-dev",
    "libssl-dev",
    "memcached",
    "libmemcached-tools",
    "rsyslog",
    "ksystemlog",
    "rabbitmq-server",
)
PYTHON3_PACKAGE = "python3"

DATABASE_NAME = "jftf_cmdb"
MOCK_DATABASE_NAME = "test_jftf_cmdb"
DATABASE_USER = "jftf"
DATABASE_PASSWORD = "jftf_development"
DATABASE_HOST = "localhost"
DATABASE_TIMEZONE = "Europe/Bucharest"

SUPERUSER_USERNAME = "jftf_dev"
SUPERUSER_EMAIL = "jftf_dev@jftf.com"
SUPERUSER_PASSWORD = "jftf_dev"

RABBITMQ_USER = "jftf"
RABBITMQ_PASSWORD = "jftf_development"
RABBITMQ_VHOST = "/"
RABBITMQ_SERVICE = "rabbitmq-server"

RSYSLOG_CONF = "/etc/rsyslog.conf"
RSYSLOG_SERVICE = "rsyslog.service"
RSYSLOG_UNCOMMENT_DIRECTIVES = (
    'module(load="imudp")',
    'input(type="imudp" port="514")',
)
RSYSLOG_ALLOWED_SENDER = "$AllowedSender UDP, 127.0.0.1"

VENV_DIRNAME = ".venv"
REQUIREMENTS_FILENAME = "requirements.txt"
MANAGE_PY_RELPATH = ("jftf_core", "manage.py")
LEGACY_VIEWS_DIRNAME = "legacy_dbdriver"
LEGACY_VIEWS_SCRIPT = "db_views_init.sh"

MIN_UBUNTU_VERSION = "22.04"
OS_RELEASE_FILE = "/etc/os-release"
DEFAULT_CONFIG_FILENAME = ".jftf-deploy.yml"
