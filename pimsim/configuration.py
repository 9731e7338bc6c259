"""Device and system settings resolved from a parameter store."""

from __future__ import annotations

from pimsim.system_configuration import (
    ConfigStore,
    address_mapping_scheme,
    pim_mode,
    pim_precision,
    queuing_structure,
    row_buffer_policy,
    scheduling_policy,
)

_UINT32_MASK = 0xFFFFFFFF


def _u32(value: int) -> int:
    return value & _UINT32_MASK


class Configuration:
    """Timing, geometry, policy and output settings of the simulated memory."""

    def __init__(self, store: ConfigStore) -> None:
        uint = store.get_uint
        self.al = uint("AL")
        self.bl = uint("BL")
        self.cmd_queue_depth = uint("CMD_QUEUE_DEPTH")
        self.device_width = uint("DEVICE_WIDTH")
        self.epoch_length = uint("EPOCH_LENGTH")
        self.histogram_bin_size = uint("HISTOGRAM_BIN_SIZE")
        self.jedec_data_bus_bits = uint("JEDEC_DATA_BUS_BITS")
        self.num_banks = uint("NUM_BANKS")
        self.num_cols = uint("NUM_COLS")
        self.num_chans = uint("NUM_CHANS")
        self.num_pim_blocks = uint("NUM_PIM_BLOCKS")
        self.num_ranks = uint("NUM_RANKS")
        self.num_rows = uint("NUM_ROWS")
        self.rl = uint("RL")
        self.t_ccdl = uint("tCCDL")
        self.t_ccds = uint("tCCDS")
        self.t_ck = store.get_float("tCK")
        self.t_cmd = uint("tCMD")
        self.t_cke = uint("tCKE")
        self.t_ras = uint("tRAS")
        self.t_rc = uint("tRC")
        self.t_rcdrd = uint("tRCDRD")
        self.t_rcdwr = uint("tRCDWR")
        self.t_refi = uint("tREFI")
        self.t_refisb = uint("tREFISB")
        self.t_rfc = uint("tRFC")
        self.t_rp = uint("tRP")
        self.t_rrdl = uint("tRRDL")
        self.t_rrds = uint("tRRDS")
        self.t_rtp = uint("tRTP")
        self.t_rtpl = uint("tRTPL")
        self.t_rtps = uint("tRTPS")
        self.t_rtrs = uint("tRTRS")
        self.t_wr = uint("tWR")
        self.t_wtrl = uint("tWTRL")
        self.t_wtrs = uint("tWTRS")
        self.t_xp = uint("tXP")
        self.total_row_accesses = uint("TOTAL_ROW_ACCESSES")
        self.trans_queue_depth = uint("TRANS_QUEUE_DEPTH")
        self.wl = uint("WL")
        self.xaw = uint("XAW")

        self.pim_mode = pim_mode(store)
        self.pim_precision = pim_precision(store)
        self.row_buffer_policy = row_buffer_policy(store)
        self.scheduling_policy = scheduling_policy(store)
        self.queuing_structure = queuing_structure(store)
        self.address_mapping_scheme = address_mapping_scheme(store)

        half_burst = self.bl // 2
        self.read_to_pre_delay = _u32(
            self.al + half_burst + max(self.t_rtpl, self.t_ccdl) - self.t_ccdl
        )
        self.read_to_pre_delay_long = self.read_to_pre_delay
        self.read_to_pre_delay_short = _u32(
            self.al + half_burst + max(self.t_rtps, self.t_ccds) - self.t_ccds
        )
        self.write_to_pre_delay = _u32(self.wl + half_burst + self.t_wr)
        self.read_to_write_delay = _u32(self.rl + half_burst + self.t_rtrs - self.wl)
        self.read_autopre_delay = _u32(self.al + self.t_rtp + self.t_rp)
        self.write_autopre_delay = _u32(self.wl + half_burst + self.t_wr + self.t_rp)
        self.write_to_read_delay_b_long = _u32(self.wl + half_burst + self.t_wtrl)
        self.write_to_read_delay_b_short = _u32(self.wl + half_burst + self.t_wtrs)
        self.write_to_read_delay_r = max(self.wl + half_burst + self.t_rtrs - self.rl, 0)

        if self.num_chans == 0:
            raise ValueError("Not allowed zero channel")

        boolean = store.get_bool
        self.debug_pim_block = boolean("DEBUG_PIM_BLOCK")
        self.debug_trans_q = boolean("DEBUG_TRANS_Q")
        self.debug_cmd_q = boolean("DEBUG_CMD_Q")
        self.debug_addr_map = boolean("DEBUG_ADDR_MAP")
        self.debug_bankstate = boolean("DEBUG_BANKSTATE")
        self.debug_bus = boolean("DEBUG_BUS")
        self.debug_banks = boolean("DEBUG_BANKS")
        self.debug_power = boolean("DEBUG_POWER")
        self.debug_cmd_trace = boolean("DEBUG_CMD_TRACE")
        self.debug_pim_time = boolean("DEBUG_PIM_TIME")

        self.print_chan_stat = boolean("PRINT_CHAN_STAT")
        self.vis_file_output = boolean("VIS_FILE_OUTPUT")
        self.verification_output = boolean("VERIFICATION_OUTPUT")
        self.show_sim_output = boolean("SHOW_SIM_OUTPUT")
        self.log_output = boolean("LOG_OUTPUT")
        self.sim_trace_file = store.get_string("SIM_TRACE_FILE")