"""PIM command encoding, simulator configuration, CSV statistics and NPY array files."""

__version__ = "0.1.0"
__all__ = [
    "npy",
    "parameter_reader",
    "csv_writer",
    "pim_cmd",
    "simulator_object",
    "system_configuration",
    "configuration",
]