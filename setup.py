from setuptools import setup, find_packages

# 步骤1：扫描 src 下所有子包（得到 ["core", "core.emitter", "core.state_machine", "model", ...]）
src_sub_packages = find_packages(where="src")  # 无 prefix 参数！

# 步骤2：给每个子包名添加 "flowstate." 前缀（变成 ["flowstate.core", "flowstate.model", ...]）
flowstate_sub_packages = [f"flowstate.{pkg}" for pkg in src_sub_packages]

setup(
    name="flowstate",
    version="0.1.0",
    description="Declarative asynchronous finite-state machines with lifecycle notifications",
    python_requires=">=3.10",
    # 步骤3：打包列表 = 主包 "flowstate" + 带前缀的子包
    packages=["flowstate"] + flowstate_sub_packages,
    # 关键映射：所有 "flowstate.*" 包的源码都在 src 目录下（自动对应子目录）
    # 例：flowstate.core → src/core，flowstate.model → src/model
    package_dir={"flowstate": "src"},
    install_requires=[
        "loguru>=0.7",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
)
