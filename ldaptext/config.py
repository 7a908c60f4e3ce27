import configparser
import os.path

DEFAULTS = {
    "ldif": {
        "fold-width": "76",
    },
    "schema": {
        "base": "cn=schema,cn=config",
    },
}

CONFIG_FILES = [
    "/etc/ldaptext/global.cfg",
    os.path.expanduser("~/.ldaptext/global.cfg"),
]

__config = None


def loadConfig(configFiles=None, reload=False):
    """
    Load configuration file.
    """
    global __config
    if __config is None or reload:
        x = configparser.ConfigParser()

        for section, options in DEFAULTS.items():
            x.add_section(section)
            for option, value in options.items():
                x.set(section, option, value)

        if configFiles is None:
            configFiles = CONFIG_FILES
        x.read(configFiles)
        __config = x
    return __config


def getFoldWidth():
    """
    Read configuration file if necessary and return the column at
    which LDIF lines get folded, 0 meaning never.
    """
    cfg = loadConfig()
    width = cfg.getint("ldif", "fold-width")
    if width < 0 or width == 1:
        raise ValueError("fold-width must be 0 or at least 2: %d" % width)
    return width


def getSchemaBase():
    """
    Read configuration file if necessary and return the DN under which
    schema entries live.
    """
    cfg = loadConfig()
    return cfg.get("schema", "base")
