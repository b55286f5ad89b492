import time

import pytest


# 按环境过滤并按层级排序
def pytest_collection_modifyitems(config, items):
    env = config.getoption("--env")
    # 生产环境跳过慢测试
    if env == "prod":
        for item in items:
            if "slow" in [m.name for m in item.iter_markers()]:
                item.add_marker(pytest.mark.skip(reason="生产环境跳过慢测试"))

    def item_priority(item):
        markers = [m.name for m in item.iter_markers()]
        if "unit" in markers:
            return 0
        elif "contract" in markers:
            return 1
        elif "integration" in markers:
            return 2
        elif "e2e" in markers:
            return 3
        return 4

    items.sort(key=item_priority)


def pytest_terminal_summary(terminalreporter, exitstatus):
    terminalreporter.write_sep("=", "shop: 用例统计")
    counts = terminalreporter.stats
    passed = len(counts.get("passed", []))
    failed = len(counts.get("failed", []))
    skipped = len(counts.get("skipped", []))
    xfailed = len(counts.get("xfailed", []))
    terminalreporter.write_line(f"通过: {passed}  失败: {failed}  跳过: {skipped}  xfail: {xfailed}")
    start = getattr(terminalreporter.config, "_shop_start", None)
    if start is None:
        return
    terminalreporter.write_line(f"耗时: {time.time() - start:.2f}秒")


def pytest_configure(config):
    config._shop_start = time.time()
