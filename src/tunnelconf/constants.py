"""
Constants shared across tunnelconf.

Provider identities, VPN types and the enumerations the validators accept.
"""

# =============================================================================
# VPN service providers
# =============================================================================

AIRVPN = "airvpn"
CUSTOM = "custom"
CYBERGHOST = "cyberghost"
EXPRESSVPN = "expressvpn"
FASTESTVPN = "fastestvpn"
HIDEMYASS = "hidemyass"
IPVANISH = "ipvanish"
IVPN = "ivpn"
MULLVAD = "mullvad"
NORDVPN = "nordvpn"
PERFECT_PRIVACY = "perfect privacy"
PRIVADO = "privado"
PRIVATE_INTERNET_ACCESS = "private internet access"
PRIVATEVPN = "privatevpn"
PROTONVPN = "protonvpn"
PUREVPN = "purevpn"
SURFSHARK = "surfshark"
TORGUARD = "torguard"
VPN_SECURE = "vpnsecure"
VPN_UNLIMITED = "vpn unlimited"
VYPRVPN = "vyprvpn"
WEVPN = "wevpn"
WINDSCRIBE = "windscribe"

ALL_PROVIDERS: tuple[str, ...] = (
    AIRVPN,
    CUSTOM,
    CYBERGHOST,
    EXPRESSVPN,
    FASTESTVPN,
    HIDEMYASS,
    IPVANISH,
    IVPN,
    MULLVAD,
    NORDVPN,
    PERFECT_PRIVACY,
    PRIVADO,
    PRIVATE_INTERNET_ACCESS,
    PRIVATEVPN,
    PROTONVPN,
    PUREVPN,
    SURFSHARK,
    TORGUARD,
    VPN_SECURE,
    VPN_UNLIMITED,
    VYPRVPN,
    WEVPN,
    WINDSCRIBE,
)

# Providers with a server list the updater can refresh (custom has none)
UPDATABLE_PROVIDERS: tuple[str, ...] = tuple(p for p in ALL_PROVIDERS if p != CUSTOM)

# =============================================================================
# VPN types and implementations
# =============================================================================

OPENVPN = "openvpn"
WIREGUARD = "wireguard"
VPN_TYPES: tuple[str, ...] = (OPENVPN, WIREGUARD)

OPENVPN_25 = "2.5"
OPENVPN_26 = "2.6"
OPENVPN_VERSIONS: tuple[str, ...] = (OPENVPN_25, OPENVPN_26)

WIREGUARD_IMPLEMENTATIONS: tuple[str, ...] = ("auto", "kernelspace", "userspace")

# Private Internet Access encryption presets
PIA_PRESET_NONE = "none"
PIA_PRESET_NORMAL = "normal"
PIA_PRESET_STRONG = "strong"

# Network interface names: letters, digits and underscores
INTERFACE_NAME_PATTERN = r"^[a-zA-Z0-9_]+$"

DEFAULT_WIREGUARD_PORT = 51820
