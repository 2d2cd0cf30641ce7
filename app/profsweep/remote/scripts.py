"""Host-side PowerShell routines.

Each routine reads ``$Params`` (see ``RemoteTask.render``) and prints a
single compressed JSON document. Routines only query the local machine
they run on.
"""

from profsweep.remote.base import RemoteTask

INVENTORY_TASK = "inventory"
DELETE_TASK = "delete"

# Output: {"workstation": bool, "caption": str, "profiles": [{sid, account,
# local_path, last_use, size_bytes}, ...]}. last_use is FILETIME ticks (UTC).
INVENTORY_SCRIPT = r"""
$ErrorActionPreference = 'Stop'
$os = Get-CimInstance -ClassName Win32_OperatingSystem
if ($os.ProductType -ne 1) {
    [pscustomobject]@{ workstation = $false; caption = $os.Caption; profiles = @() } |
        ConvertTo-Json -Depth 4 -Compress
    return
}
$root = $Params.users_root.TrimEnd('\') + '\'
$rows = foreach ($p in Get-CimInstance -ClassName Win32_UserProfile) {
    if ($p.Special -or $p.Loaded) { continue }
    if (-not $p.LocalPath) { continue }
    if (-not $p.LocalPath.StartsWith($root, [System.StringComparison]::OrdinalIgnoreCase)) { continue }
    $account = $null
    try {
        $sid = New-Object System.Security.Principal.SecurityIdentifier($p.SID)
        $account = $sid.Translate([System.Security.Principal.NTAccount]).Value
    } catch {
        $account = $null
    }
    $lastUse = $null
    if ($p.LastUseTime) { $lastUse = $p.LastUseTime.ToFileTimeUtc() }
    $size = $null
    if ($Params.measure_size) {
        try {
            $size = (Get-ChildItem -LiteralPath $p.LocalPath -Recurse -Force -File -ErrorAction SilentlyContinue |
                Measure-Object -Property Length -Sum).Sum
        } catch {
            $size = $null
        }
    }
    [pscustomobject]@{
        sid = $p.SID
        account = $account
        local_path = $p.LocalPath
        last_use = $lastUse
        size_bytes = $size
    }
}
[pscustomobject]@{ workstation = $true; caption = $os.Caption; profiles = @($rows) } |
    ConvertTo-Json -Depth 4 -Compress
"""

# Output: [{sid, deleted, code, message}, ...], one entry per requested SID.
# code is 0 on success, the CIM status on failure, or 'skipped' / 'exception'.
DELETE_SCRIPT = r"""
$ErrorActionPreference = 'Stop'
$results = foreach ($sid in @($Params.security_ids)) {
    try {
        $p = Get-CimInstance -ClassName Win32_UserProfile -Filter "SID = '$sid'"
        if (-not $p) {
            [pscustomobject]@{ sid = $sid; deleted = $false; code = 'skipped'; message = 'profile not found' }
            continue
        }
        if ($p.Loaded) {
            [pscustomobject]@{ sid = $sid; deleted = $false; code = 'skipped'; message = 'profile is loaded' }
            continue
        }
        if ($p.Special) {
            [pscustomobject]@{ sid = $sid; deleted = $false; code = 'skipped'; message = 'special profile' }
            continue
        }
        Remove-CimInstance -InputObject $p
        [pscustomobject]@{ sid = $sid; deleted = $true; code = 0; message = 'deleted' }
    } catch [Microsoft.Management.Infrastructure.CimException] {
        [pscustomobject]@{
            sid = $sid; deleted = $false
            code = [int]$_.Exception.NativeErrorCode; message = $_.Exception.Message
        }
    } catch {
        [pscustomobject]@{ sid = $sid; deleted = $false; code = 'exception'; message = $_.Exception.Message }
    }
}
ConvertTo-Json -InputObject @($results) -Depth 3 -Compress
"""


def inventory_task(users_root: str, measure_size: bool = False) -> RemoteTask:
    """Build the inventory routine for one host.

    Args:
        users_root: Managed users directory on the host.
        measure_size: Whether to sum profile folder sizes.

    Returns:
        RemoteTask ready to dispatch.
    """
    return RemoteTask(
        name=INVENTORY_TASK,
        body=INVENTORY_SCRIPT,
        params={"users_root": users_root, "measure_size": measure_size},
    )


def delete_task(security_ids: list[str]) -> RemoteTask:
    """Build the deletion routine for one host.

    Args:
        security_ids: SIDs to delete, in the order they should be processed.

    Returns:
        RemoteTask ready to dispatch.
    """
    return RemoteTask(
        name=DELETE_TASK,
        body=DELETE_SCRIPT,
        params={"security_ids": list(security_ids)},
    )
