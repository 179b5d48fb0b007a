#!filepath: steplog/utils/filesystem.py
from pathlib import Path

from steplog import logs


class FileSystem:
    """
    文件系统工具
    - 自动创建目录
    - 删除 case 目录下的 ledger 输出
    """

    @staticmethod
    def ensure_dir(path: str | Path) -> Path:
        """
        创建目录（如果不存在）
        """
        p = Path(path)
        if not p.exists():
            p.mkdir(parents=True, exist_ok=True)
            logs.debug(f"[FS] created directory: {p}")
        return p

    @staticmethod
    def remove_files(folder: str | Path, names: tuple[str, ...]) -> int:
        """
        删除 folder 下指定文件名的文件，返回删除的数量
        """
        p = Path(folder)
        count = 0
        for name in names:
            f = p / name
            if f.is_file():
                f.unlink()
                count += 1
                logs.debug(f"[FS] removed file: {f}")
        return count
