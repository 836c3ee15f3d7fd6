# src/retro_chip8/arch/chip8/instructions/maps.py
"""
命令ワードと命令クラス、命令クラスと実行関数のマッピング定義。
"""
from . import alu
from . import control
from . import devices
from . import load

# @intent:map 最上位ニブルだけで一意に決まる命令グループ。
PRIMARY_DECODE_MAP = {
    0x1: control.Jump,
    0x2: control.Call,
    0x3: control.SkipEqImm,
    0x4: control.SkipNeImm,
    0x6: load.LoadImm,
    0x7: alu.AddImm,
    0xA: load.LoadAddr,
    0xB: control.JumpOffset,
    0xC: alu.Rand,
    0xD: devices.Draw,
}

# @intent:map 0x0 グループ。命令ワード全体で判定し、それ以外は SYS とします。
SYSTEM_DECODE_MAP = {
    0x00E0: devices.ClearScreen,
    0x00EE: control.Return,
}

# @intent:map 5xy0 / 9xy0。最下位ニブルが0のものだけが有効です。
REGISTER_COMPARE_DECODE_MAP = {
    0x5: control.SkipEqReg,
    0x9: control.SkipNeReg,
}

# @intent:map 0x8 グループ。最下位ニブルで判定します。
LOGICAL_DECODE_MAP = {
    0x0: load.LoadReg,
    0x1: alu.OrReg,
    0x2: alu.AndReg,
    0x3: alu.XorReg,
    0x4: alu.AddReg,
    0x5: alu.SubReg,
    0x6: alu.ShrReg,
    0x7: alu.SubnReg,
    0xE: alu.ShlReg,
}

# @intent:map 0xE グループ。下位バイトで判定します。
KEY_DECODE_MAP = {
    0x9E: devices.SkipKey,
    0xA1: devices.SkipNotKey,
}

# @intent:map 0xF グループ。下位バイトで判定します。
MISC_DECODE_MAP = {
    0x07: load.GetDelay,
    0x0A: devices.WaitKey,
    0x15: load.SetDelay,
    0x18: load.SetSound,
    0x1E: load.AddAddr,
    0x29: load.LoadDigit,
    0x33: load.StoreBcd,
    0x55: load.StoreMem,
    0x65: load.LoadMem,
}

# @intent:map Super-CHIP / CHIP-48 の拡張命令。認識はするが実装しません。
SUPER_SYSTEM_WORDS = frozenset({0x00FB, 0x00FC, 0x00FD, 0x00FE, 0x00FF})  # scr, scl, exit, low, high
SUPER_SCROLL_DOWN_PREFIX = 0x00C0  # 00Cn
SUPER_MISC_CODES = frozenset({0x30, 0x75, 0x85})  # Fx30, Fx75, Fx85

# @intent:map 命令クラスから実行関数へのマッピングテーブル。全ての命令クラスを網羅します。
EXECUTE_MAP = {
    # Control
    control.SysCall: control.execute_sys,
    control.Return: control.execute_ret,
    control.Jump: control.execute_jp,
    control.JumpOffset: control.execute_jp_offset,
    control.Call: control.execute_call,
    control.SkipEqImm: control.execute_se_imm,
    control.SkipNeImm: control.execute_sne_imm,
    control.SkipEqReg: control.execute_se_reg,
    control.SkipNeReg: control.execute_sne_reg,

    # ALU
    alu.AddImm: alu.execute_add_imm,
    alu.AddReg: alu.execute_add_reg,
    alu.SubReg: alu.execute_sub_reg,
    alu.SubnReg: alu.execute_subn_reg,
    alu.OrReg: alu.execute_or,
    alu.AndReg: alu.execute_and,
    alu.XorReg: alu.execute_xor,
    alu.ShrReg: alu.execute_shr,
    alu.ShlReg: alu.execute_shl,
    alu.Rand: alu.execute_rnd,

    # Load/Store
    load.LoadImm: load.execute_ld_imm,
    load.LoadReg: load.execute_ld_reg,
    load.LoadAddr: load.execute_ld_addr,
    load.AddAddr: load.execute_add_addr,
    load.LoadDigit: load.execute_ld_digit,
    load.GetDelay: load.execute_get_delay,
    load.SetDelay: load.execute_set_delay,
    load.SetSound: load.execute_set_sound,
    load.StoreBcd: load.execute_store_bcd,
    load.StoreMem: load.execute_store_mem,
    load.LoadMem: load.execute_load_mem,

    # Display/Keypad
    devices.ClearScreen: devices.execute_cls,
    devices.Draw: devices.execute_drw,
    devices.SkipKey: devices.execute_skp,
    devices.SkipNotKey: devices.execute_sknp,
    devices.WaitKey: devices.execute_wait_key,
}
