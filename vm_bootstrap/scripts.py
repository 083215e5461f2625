from __future__ import annotations

from .diagnostics import INIT_LOG_MARKER

# Fetched by a freshly created VM with no identity. Works out its own identity,
# pulls the encrypted environment bundle and execs the chain script returned
# for that identity.
PRELOADER_SCRIPT = (
    """#!/usr/bin/env bash
#
# Bootstrap preloader
#
"""
    + INIT_LOG_MARKER
    + """
#
set -euo pipefail

: "${BOOTSTRAP_URL:?BOOTSTRAP_URL must point at the bootstrap service}"
: "${BOOTSTRAP_ENV_URL:?BOOTSTRAP_ENV_URL must point at the encrypted environment bundle}"
: "${BOOTSTRAP_ENV_PASSPHRASE:?BOOTSTRAP_ENV_PASSPHRASE is required to decrypt the environment bundle}"

workdir="$(mktemp -d /tmp/bootstrap.XXXXXX)"
trap 'rm -rf "${workdir}"' EXIT

platform=''
platform_version=''
if [ -r /etc/os-release ]; then
  platform="$(. /etc/os-release && echo "${ID:-}")"
  platform_version="$(. /etc/os-release && echo "${VERSION_ID:-}")"
fi

curl -fsSL "${BOOTSTRAP_ENV_URL}" -o "${workdir}/env.enc"
openssl enc -d -aes-256-cbc -pbkdf2 \\
  -in "${workdir}/env.enc" -out "${workdir}/env" \\
  -pass env:BOOTSTRAP_ENV_PASSPHRASE
set -a
. "${workdir}/env"
set +a

curl -fsSL "${BOOTSTRAP_URL}" \\
  --data-urlencode "app=${BOOTSTRAP_APP:-}" \\
  --data-urlencode "hostname=$(hostname)" \\
  --data-urlencode "platform=${platform}" \\
  --data-urlencode "platform_version=${platform_version}" \\
  -o "${workdir}/chain.sh"

bash "${workdir}/chain.sh" "$@"
"""
)

USAGE_ERROR_SCRIPT = (
    """#!/usr/bin/env bash
#
"""
    + INIT_LOG_MARKER
    + """
#
cat >&2 <<'USAGE'
Error: Unable to locate suitable bootstrap script.

Retry with a POST body describing this machine, for example:

  curl -fsSL -X POST "${BOOTSTRAP_URL}" \\
    -d app=<application role> \\
    -d hostname=<hostname> \\
    -d platform=<platform name> \\
    -d platform_version=<platform version>

Any of app, hostname, platform and platform_version may be omitted,
but at least one of them must match a script on the server.
USAGE
exit 1
"""
)
