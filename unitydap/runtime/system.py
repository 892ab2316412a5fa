import platform
from dataclasses import dataclass

import psutil

from unitydap.internal.constants import UNITY_DEBUGGER_PORT_BASE, UNITY_DEBUGGER_PORT_SPAN

# Editor executables that host a Mono debugger agent.
UNITY_PROCESS_NAMES = ("unity", "unity.exe")


@dataclass(frozen=True)
class UnityProcess:
    pid: int
    name: str
    debugger_port: int


def get_os_info():
    return platform.system()


def get_cpu_arch():
    return platform.machine()


def unity_debugger_port(process_id: int) -> int:
    """Port the Unity debugger agent of `process_id` listens on."""
    return UNITY_DEBUGGER_PORT_BASE + process_id % UNITY_DEBUGGER_PORT_SPAN


def find_unity_processes() -> list[UnityProcess]:
    """
    Running Unity editor processes, with the port their debugger listens on.
    Processes that vanish or deny access while being inspected are skipped.
    """
    found = []
    for proc in psutil.process_iter(["pid", "name"]):
        try:
            name = proc.info.get("name") or ""
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
        if name.lower() in UNITY_PROCESS_NAMES:
            pid = proc.info["pid"]
            found.append(UnityProcess(pid=pid, name=name, debugger_port=unity_debugger_port(pid)))
    return sorted(found, key=lambda p: p.pid)


if __name__ == "__main__":
    print(f"OS: {get_os_info()}")
    print(f"Architecture: {get_cpu_arch()}")
    for p in find_unity_processes():
        print(f"{p.pid} {p.name} -> {p.debugger_port}")
