"""
仮想マシンのエラー分類。

Decoderは失敗しません（不正なビットパターンは InvalidInstruction になります）。
以下の例外はストアと命令実行で発生し、停止するか継続するかは実行エンジンだけが判断します。
"""
from typing import Optional

# @intent:responsibility VMの全てのエラーの基底クラス。診断情報（オペコード、PC）を保持します。
class VmError(Exception):
    def __init__(self, message: str, opcode: Optional[int] = None, pc: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.opcode = opcode
        self.pc = pc

# @intent:responsibility 命令表に存在しないオペコード。既定では非致命的で、エンジンの方針で扱いが決まります。
class DecodeMiss(VmError):
    pass

# @intent:responsibility 空のコールスタックからのポップ。
class StackUnderflow(VmError):
    pass

# @intent:responsibility 上限を超えるコールスタックへのプッシュ。
class StackOverflow(VmError):
    pass

# @intent:responsibility RAMアドレスまたはレジスタ番号が有効範囲外。
# @intent:rationale 既存の IndexError ハンドラでも捕捉できるよう IndexError も継承します。
class OutOfBounds(VmError, IndexError):
    pass
